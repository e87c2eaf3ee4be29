"""Adaptador de registrador: Porkbun (API JSON v3).

Flujo:
- `POST /domain/checkDomain/{domain}` con el par de claves -> disponibilidad
  (y precio promocional del primer año cuando Porkbun tiene uno).
- `POST /pricing/get` -> tabla de precios (registro/renovación/transferencia)
  por TLD. Se descarga una vez por TTL y se comparte entre dominios; si falla,
  la cotización conserva solo la disponibilidad.

Docs: https://porkbun.com/api/json/v3/documentation
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import build_async_client
from adapters.memo import AsyncTtlMemo
from adapters.registrars.base import _has_all
from core.config import AppSettings
from core.domain.models import RegistrarQuote
from core.domain.names import split_domain
from core.logging import get_logger

log = get_logger(__name__)


class PorkbunError(Exception):
    """Porkbun answered with a non-SUCCESS status or an unexpected body."""


def _to_price(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)  # Porkbun sends prices as strings, e.g. "9.68"
    except (TypeError, ValueError):
        return None
    return price if price > 0 else None


def _tld_prices(pricing: object, tld: str) -> dict[str, float | None]:
    entry = pricing.get(tld) if isinstance(pricing, dict) else None
    if not isinstance(entry, dict):
        return {}
    return {
        "price": _to_price(entry.get("registration")),
        "renewal_price": _to_price(entry.get("renewal")),
        "transfer_price": _to_price(entry.get("transfer")),
    }


class PorkbunRegistrar:
    name = "Porkbun"
    cache_errors = False
    cache_ttl: float | None = 60.0

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._pricing: AsyncTtlMemo[dict[str, Any]] = AsyncTtlMemo(self._settings.porkbun_pricing_ttl_seconds)

    def enabled(self) -> bool:
        return _has_all(self._settings.porkbun_api_key, self._settings.porkbun_secret_key)

    def _auth(self) -> dict[str, str]:
        return {
            "apikey": self._settings.porkbun_api_key or "",
            "secretapikey": self._settings.porkbun_secret_key or "",
        }

    async def _check_availability(self, client: httpx.AsyncClient, domain: str) -> dict[str, Any]:
        url = f"{self._settings.porkbun_base_url}/domain/checkDomain/{domain}"
        resp = await client.post(url, json=self._auth())
        data = resp.json()
        if not isinstance(data, dict) or data.get("status") != "SUCCESS":
            message = data.get("message") if isinstance(data, dict) else None
            raise PorkbunError(message or f"checkDomain failed (HTTP {resp.status_code})")
        response = data.get("response")
        if not isinstance(response, dict):
            raise PorkbunError("checkDomain returned no response body")
        return response

    async def _fetch_pricing_table(self) -> dict[str, Any]:
        async with build_async_client(self._settings, transport=self._transport) as client:
            resp = await client.post(f"{self._settings.porkbun_base_url}/pricing/get", json=self._auth())
        data = resp.json()
        if not isinstance(data, dict) or data.get("status") != "SUCCESS":
            raise PorkbunError(f"pricing/get failed (HTTP {resp.status_code})")
        pricing = data.get("pricing")
        if not isinstance(pricing, dict):
            raise PorkbunError("pricing/get returned no pricing table")
        log.debug("porkbun pricing table loaded: %d TLDs", len(pricing))
        return pricing

    async def _tld_pricing(self, tld: str) -> dict[str, float | None]:
        try:
            table = await self._pricing.get_or_fetch(self._settings.porkbun_base_url, self._fetch_pricing_table)
        except (httpx.HTTPError, ValueError, PorkbunError) as exc:
            log.debug("porkbun pricing unavailable for .%s: %s", tld, exc)
            return {}
        return _tld_prices(table, tld)

    async def check(self, domain: str) -> RegistrarQuote:
        if not self.enabled():
            return RegistrarQuote.not_configured(self.name)

        _, tld = split_domain(domain)
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                availability = await self._check_availability(client, domain)
            prices = await self._tld_pricing(tld)
        except Exception as exc:  # noqa: BLE001 - check() must never raise
            log.warning("porkbun check failed for %s: %s", domain, exc)
            return RegistrarQuote.failure(self.name, str(exc) or type(exc).__name__)

        promo_price = None
        if str(availability.get("firstYearPromo", "")).lower() == "yes":
            promo_price = _to_price(availability.get("price"))
        if prices.get("price") is None:
            # checkDomain also carries the regular price; use it when the TLD table is missing.
            prices["price"] = _to_price(availability.get("regularPrice")) or _to_price(availability.get("price"))
        if prices.get("renewal_price") is None:
            prices["renewal_price"] = prices.get("price")

        return RegistrarQuote(
            registrar=self.name,
            available=str(availability.get("avail", "")).lower() == "yes",
            price=prices.get("price"),
            renewal_price=prices.get("renewal_price"),
            transfer_price=prices.get("transfer_price"),
            promo_price=promo_price,
            currency="USD",
        )
