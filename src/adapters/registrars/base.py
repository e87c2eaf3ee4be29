"""Comportamiento común de los registradores con precio de lista.

Por qué una base:
- Estos backends responden la disponibilidad con una consulta RDAP y
  cotizan el precio de lista configurado del registrador.
- Las credenciales solo deciden si la integración está configurada.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from adapters.rdap import RdapLookup
from core.config import AppSettings
from core.domain.models import RegistrarQuote
from core.logging import get_logger

log = get_logger(__name__)


def _has_all(*values: str | None) -> bool:
    return all(isinstance(v, str) and v.strip() for v in values)


class ListPriceRegistrar(ABC):
    """Base de los adaptadores de precio de lista.

    Las subclases fijan `name`, los precios y `enabled()`. Pasar el mismo
    `rdap` a varias instancias hace que compartan una consulta por dominio.
    """

    name: str = ""
    cache_errors: bool = False
    cache_ttl: float | None = None

    list_price: float | None = None
    renewal_price: float | None = None
    currency: str = "USD"

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        rdap: RdapLookup | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._rdap = rdap or RdapLookup(self._settings, transport=transport)

    @abstractmethod
    def enabled(self) -> bool:
        """True si las credenciales del registrador están presentes."""

    async def check(self, domain: str) -> RegistrarQuote:
        if not self.enabled():
            return RegistrarQuote.not_configured(self.name)
        try:
            available = await self._rdap.available(domain)
        except Exception as exc:  # noqa: BLE001 - check() must never raise
            log.warning("%s availability lookup failed for %s: %s", self.name, domain, exc)
            return RegistrarQuote.failure(self.name, str(exc) or type(exc).__name__)

        return RegistrarQuote(
            registrar=self.name,
            available=available,
            price=self.list_price,
            renewal_price=self.renewal_price,
            currency=self.currency,
        )
