"""Registradores concretos.

Cada módulo implementa `core.interfaces.registrar.RegistrarAdapter`.
`default_adapters` fija el orden de presentación usado por el registry y
comparte una única consulta RDAP entre los adaptadores de precio de lista.
"""

from __future__ import annotations

import httpx

from adapters.rdap import RdapLookup
from adapters.registrars.base import ListPriceRegistrar
from adapters.registrars.cloudflare import CloudflareRegistrar
from adapters.registrars.godaddy import GoDaddyRegistrar
from adapters.registrars.namecheap import NamecheapRegistrar
from adapters.registrars.porkbun import PorkbunRegistrar
from adapters.registrars.upflare import UpflareRegistrar
from core.config import AppSettings
from core.interfaces.registrar import RegistrarAdapter


def default_adapters(
    settings: AppSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RegistrarAdapter]:
    rdap = RdapLookup(settings, transport=transport)
    return [
        NamecheapRegistrar(settings, rdap=rdap),
        GoDaddyRegistrar(settings, rdap=rdap),
        PorkbunRegistrar(settings, transport=transport),
        CloudflareRegistrar(settings, rdap=rdap),
        UpflareRegistrar(settings, rdap=rdap),
    ]


__all__ = [
    "CloudflareRegistrar",
    "GoDaddyRegistrar",
    "ListPriceRegistrar",
    "NamecheapRegistrar",
    "PorkbunRegistrar",
    "UpflareRegistrar",
    "default_adapters",
]
