"""Consulta RDAP del registro.

Por qué RDAP:
- Responde "¿está registrado este nombre?" directamente desde el registro;
  es la señal de disponibilidad que comparten los adaptadores de precio de
  lista.
- 404 => no registrado (disponible); 200 => registrado (ocupado); cualquier
  otro estado (429, 403, 5xx) => desconocido, se lanza `RdapError`.

Nota:
- `RdapLookup` memoiza el resultado por dominio y lo comparte entre
  adaptadores: un dominio genera una sola petición por TTL, no una por
  registrador.
"""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client
from adapters.memo import AsyncTtlMemo
from core.config import AppSettings
from core.logging import get_logger

log = get_logger(__name__)


class RdapError(Exception):
    """RDAP devolvió un estado que no dice nada sobre la disponibilidad."""


async def rdap_available(
    domain: str,
    *,
    client: httpx.AsyncClient,
    base_url: str = "https://rdap.org",
) -> bool:
    url = f"{base_url.rstrip('/')}/domain/{domain}"
    response = await client.get(url, headers={"Accept": "application/rdap+json"})
    if response.status_code == 404:
        return True
    if response.status_code == 200:
        return False
    raise RdapError(f"RDAP unexpected status {response.status_code}")


class RdapLookup:
    """Disponibilidad vía RDAP, memoizada por dominio."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        memo: AsyncTtlMemo[bool] | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._memo: AsyncTtlMemo[bool] = memo or AsyncTtlMemo(self._settings.rdap_cache_ttl_seconds)

    async def available(self, domain: str) -> bool:
        return await self._memo.get_or_fetch(domain, lambda: self._fetch(domain))

    async def _fetch(self, domain: str) -> bool:
        log.debug("rdap lookup %s", domain)
        async with build_async_client(self._settings, transport=self._transport) as client:
            return await rdap_available(domain, client=client, base_url=self._settings.rdap_base_url)
