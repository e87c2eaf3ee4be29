"""
Pytest configuration and shared fixtures.

Provides:
- `make_registrar`: factory for deterministic in-memory registrar adapters
- `fake_clock`: manually advanced clock for cache expiry tests
- `settings`: AppSettings isolated from the developer's environment/.env files
"""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from core.config import AppSettings
from core.domain.models import RegistrarQuote
from core.services.aggregator import Aggregator
from core.services.quote_cache import QuoteCache
from core.services.registry import AdapterRegistry

# Scenario prices: one per bundled registrar slot.
SCENARIO_PRICES = [12.98, 14.99, 9.73, 8.03, 10.49]


class FakeRegistrar:
    """Deterministic registrar double; records every domain it is asked about."""

    cache_errors = False
    cache_ttl: float | None = None

    def __init__(
        self,
        name: str,
        *,
        available: bool = True,
        price: float | None = None,
        error: str | None = None,
        raises: Exception | None = None,
        configured: bool = True,
        delay: float = 0.0,
        currency: str | None = "USD",
    ) -> None:
        self.name = name
        self.available = available
        self.price = price
        self.error = error
        self.raises = raises
        self.configured = configured
        self.delay = delay
        self.currency = currency
        self.calls: list[str] = []

    def enabled(self) -> bool:
        return self.configured

    async def check(self, domain: str) -> RegistrarQuote:
        self.calls.append(domain)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        if not self.configured:
            return RegistrarQuote.not_configured(self.name)
        if self.error is not None:
            return RegistrarQuote.failure(self.name, self.error)
        return RegistrarQuote(
            registrar=self.name,
            available=self.available,
            price=self.price,
            currency=self.currency,
        )


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def make_registrar() -> Callable[..., FakeRegistrar]:
    return FakeRegistrar


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scenario_registrars() -> list[FakeRegistrar]:
    """Five available registrars with distinct prices (cheapest: R4 at 8.03)."""
    return [FakeRegistrar(f"R{i}", price=price) for i, price in enumerate(SCENARIO_PRICES)]


@pytest.fixture
def scenario_aggregator(scenario_registrars: list[FakeRegistrar]) -> Aggregator:
    return Aggregator(AdapterRegistry(scenario_registrars), QuoteCache())


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> AppSettings:
    """Settings that ignore real env vars and .env files."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "NAMECHEAP_API_KEY",
        "NAMECHEAP_API_USER",
        "GODADDY_API_KEY",
        "GODADDY_API_SECRET",
        "PORKBUN_API_KEY",
        "PORKBUN_SECRET_KEY",
        "CLOUDFLARE_API_TOKEN",
        "UPFLARE_API_KEY",
    ):
        monkeypatch.delenv(var, raising=False)
        monkeypatch.delenv(f"DOMAIN_SCOUT_{var}", raising=False)
    monkeypatch.delenv("DOMAIN_SCOUT_AI_API_KEY", raising=False)
    return AppSettings(_env_file=None)
