"""Adapter registry: the fixed, ordered set of registrar backends.

Built once from configuration at process start; read-only afterwards.
Adding or removing a backend is a configuration change, not a runtime call.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from core.config import AppSettings
from core.interfaces.registrar import RegistrarAdapter


class AdapterRegistry:
    def __init__(self, adapters: Iterable[RegistrarAdapter]) -> None:
        self._adapters: tuple[RegistrarAdapter, ...] = tuple(adapters)
        names = [a.name.lower() for a in self._adapters]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate registrar names in registry: {names}")

    def all(self) -> tuple[RegistrarAdapter, ...]:
        return self._adapters

    def enabled(self) -> tuple[RegistrarAdapter, ...]:
        return tuple(a for a in self._adapters if a.enabled())

    def names(self) -> list[str]:
        return [a.name for a in self._adapters]

    def __iter__(self) -> Iterator[RegistrarAdapter]:
        return iter(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)


def build_default_registry(settings: AppSettings | None = None) -> AdapterRegistry:
    """Registry with every bundled backend, in display order."""

    from adapters.registrars import default_adapters  # noqa: PLC0415

    settings = settings or AppSettings()
    return AdapterRegistry(default_adapters(settings))
