"""Contrato de los adaptadores de registrador.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Los backends (Porkbun, Namecheap, dobles de test...) son intercambiables y
  el agregador nunca trata a ninguno de forma especial.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import RegistrarQuote


@runtime_checkable
class RegistrarAdapter(Protocol):
    """Contrato mínimo para un backend de registrador.

    Reglas de diseño:
    - `check` es asíncrono porque típicamente hace I/O (HTTP).
    - `check` nunca lanza: falta de configuración, red y parseo vuelven como
      una cotización con `error` y `available=False`.
    - `cache_errors` permite cachear también las cotizaciones con error; por
      defecto el agregador solo memoiza las correctas.
    - `cache_ttl` fija la vida de sus cotizaciones en caché; `None` usa el
      TTL por defecto de la caché.
    """

    name: str
    cache_errors: bool
    cache_ttl: float | None

    def enabled(self) -> bool:
        """True si el backend está configurado (credenciales presentes)."""

        ...

    async def check(self, domain: str) -> RegistrarQuote:
        """Comprueba disponibilidad y precio de `domain` (ya normalizado)."""

        ...
