"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y campos autodocumentados (Field) sin acoplar el Core a
  librerías de I/O.
- Los resultados llegan de backends heterogéneos; una forma normalizada
  (`RegistrarQuote`) permite al agregador tratarlos por igual.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
- En el wire los nombres van en camelCase (`bestPrice`, `renewalPrice`,
  `durationMs`); el código Python usa los atributos snake_case.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from core.domain.names import MAX_DOMAIN_LENGTH, is_valid_domain, normalize_domain, split_domain


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class DomainQuery(BaseModel):
    """Nombre de dominio normalizado y validado.

    Se construye una vez al ingerir y nunca se muta después.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=4,
        max_length=MAX_DOMAIN_LENGTH,
        description="Lowercase domain, e.g. 'example.com'.",
    )

    @field_validator("name", mode="before")
    @classmethod
    def _normalize(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_domain(value)
        return value

    @field_validator("name")
    @classmethod
    def _check_shape(cls, value: str) -> str:
        if not is_valid_domain(value):
            raise ValueError(f"not a valid domain name: {value!r}")
        return value

    @property
    def sld(self) -> str:
        return split_domain(self.name)[0]

    @property
    def tld(self) -> str:
        return split_domain(self.name)[1]

    def __str__(self) -> str:
        return self.name


class RegistrarQuote(_WireModel):
    """Resultado de un adaptador de registrador para un dominio.

    O bien una cotización correcta (disponibilidad + precios opcionales) o un
    error; una cotización con error nunca está disponible ni lleva precio.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    registrar: str = Field(..., min_length=1, max_length=64)
    available: bool = Field(default=False)
    price: float | None = Field(default=None, ge=0, description="Purchase price.")
    renewal_price: float | None = Field(default=None, ge=0)
    transfer_price: float | None = Field(default=None, ge=0)
    promo_price: float | None = Field(default=None, ge=0)
    promo_end_date: str | None = Field(default=None)
    currency: str | None = Field(default=None, max_length=8)
    error: str | None = Field(
        default=None,
        description="Set iff the check failed or the backend is not configured.",
    )
    configured: bool = Field(
        default=True,
        description="False when the backend integration has no credentials.",
    )
    checked_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _error_excludes_offer(self) -> "RegistrarQuote":
        if self.error is not None and (self.available or self.price is not None):
            raise ValueError("an error quote cannot be available or priced")
        return self

    @classmethod
    def failure(cls, registrar: str, error: str, *, configured: bool = True) -> "RegistrarQuote":
        return cls(registrar=registrar, available=False, error=error or "error", configured=configured)

    @classmethod
    def not_configured(cls, registrar: str) -> "RegistrarQuote":
        return cls.failure(registrar, "not_configured", configured=False)

    @property
    def ok(self) -> bool:
        return self.error is None


class BestOffer(_WireModel):
    registrar: str
    price: float
    currency: str = "USD"


class AggregatedResult(_WireModel):
    """Todas las cotizaciones de un dominio, ordenadas, más campos derivados."""

    domain: str
    available: bool = Field(
        default=False,
        description="True iff at least one quote reports availability.",
    )
    best_offer: BestOffer | None = Field(default=None, alias="bestPrice")
    quotes: list[RegistrarQuote] = Field(default_factory=list, alias="registrars")


class BulkReport(_WireModel):
    total: int = Field(..., ge=0, description="Domains submitted after extraction.")
    processed: int = Field(..., ge=0)
    duration_ms: int = Field(..., ge=0)
    results: list[AggregatedResult] = Field(default_factory=list)


class SuggestionCategory(str, Enum):
    """Conjunto fijo de categorías que puede asignar el servicio de sugerencias."""

    EXACT = "exact"
    BRANDABLE = "brandable"
    COMPOUND = "compound"
    ALTERNATIVE = "alternative"


class SearchQuery(_WireModel):
    """Palabras clave y restricciones de una búsqueda de nombres."""

    keywords: list[str] = Field(default_factory=list)
    business_type: str | None = None
    target_audience: str | None = None
    budget: float | None = Field(default=None, ge=0)
    preferred_tlds: list[str] | None = None
    exclude_words: list[str] | None = None
    brandable: bool | None = None
    max_length: int | None = Field(default=None, ge=1, le=MAX_DOMAIN_LENGTH)
    include_hyphens: bool | None = None
    include_numbers: bool | None = None

    @field_validator("keywords")
    @classmethod
    def _strip_keywords(cls, value: list[str]) -> list[str]:
        return [k.strip() for k in value if isinstance(k, str) and k.strip()]


class DomainSuggestion(_WireModel):
    domain: str = Field(..., min_length=1, max_length=MAX_DOMAIN_LENGTH)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    reasoning: str = Field(default="")
    category: SuggestionCategory = Field(default=SuggestionCategory.ALTERNATIVE)
    available: bool | None = Field(
        default=None,
        description="Filled by the aggregator; None until priced or when the name is invalid.",
    )
    best_offer: BestOffer | None = Field(default=None, alias="bestPrice")
    pricing: list[RegistrarQuote] = Field(default_factory=list)


class SearchResult(_WireModel):
    query: SearchQuery
    suggestions: list[DomainSuggestion] = Field(default_factory=list)
    total_results: int = Field(default=0, ge=0)
    search_time: float = Field(default=0.0, ge=0, description="Seconds spent.")
    ai_insights: str = Field(default="")
