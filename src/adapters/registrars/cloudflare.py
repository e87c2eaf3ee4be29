"""Registrador: Cloudflare.

Cloudflare Registrar vende a precio de coste y solo a zonas que ya gestiona;
la cotización es ese precio de lista (renovación idéntica).
"""

from __future__ import annotations

from adapters.registrars.base import ListPriceRegistrar, _has_all


class CloudflareRegistrar(ListPriceRegistrar):
    name = "Cloudflare"
    list_price = 8.03
    renewal_price = 8.03

    def enabled(self) -> bool:
        return _has_all(self._settings.cloudflare_api_token)
