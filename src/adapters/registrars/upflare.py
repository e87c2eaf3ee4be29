"""Registrador: Upflare (registrador genérico, precio de lista)."""

from __future__ import annotations

from adapters.registrars.base import ListPriceRegistrar, _has_all


class UpflareRegistrar(ListPriceRegistrar):
    name = "Upflare"
    list_price = 10.49
    renewal_price = 12.49

    def enabled(self) -> bool:
        return _has_all(self._settings.upflare_api_key)
