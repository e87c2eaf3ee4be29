"""Registrador: Namecheap (precio de lista + disponibilidad RDAP)."""

from __future__ import annotations

from adapters.registrars.base import ListPriceRegistrar, _has_all


class NamecheapRegistrar(ListPriceRegistrar):
    name = "Namecheap"
    list_price = 12.98
    renewal_price = 14.98

    def enabled(self) -> bool:
        return _has_all(self._settings.namecheap_api_key, self._settings.namecheap_api_user)
