"""Registrador: GoDaddy (precio de lista + disponibilidad RDAP)."""

from __future__ import annotations

from adapters.registrars.base import ListPriceRegistrar, _has_all


class GoDaddyRegistrar(ListPriceRegistrar):
    name = "GoDaddy"
    list_price = 14.99
    renewal_price = 18.99

    def enabled(self) -> bool:
        return _has_all(self._settings.godaddy_api_key, self._settings.godaddy_api_secret)
