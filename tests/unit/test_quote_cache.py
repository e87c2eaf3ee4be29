from __future__ import annotations

import threading

import pytest

from core.domain.models import RegistrarQuote
from core.services.quote_cache import QuoteCache


def _quote(registrar: str = "R0", price: float = 10.0) -> RegistrarQuote:
    return RegistrarQuote(registrar=registrar, available=True, price=price, currency="USD")


def test_hit_within_ttl(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock)
    quote = _quote()
    cache.set("R0", "example.com", quote)

    fake_clock.advance(59.9)
    assert cache.get("R0", "example.com") == quote


def test_entry_valid_at_expiry_instant_and_gone_after(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock)
    cache.set("R0", "example.com", _quote())

    fake_clock.advance(60)
    assert cache.get("R0", "example.com") is not None

    fake_clock.advance(0.001)
    assert cache.get("R0", "example.com") is None
    assert len(cache) == 0


def test_keys_are_case_insensitive_and_per_backend(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock)
    cache.set("Porkbun", "Example.com", _quote("Porkbun"))

    assert cache.get("porkbun", "example.com") is not None
    assert cache.get("Namecheap", "example.com") is None


def test_per_entry_ttl_overrides_default(fake_clock) -> None:
    cache = QuoteCache(300, clock=fake_clock)
    cache.set("R0", "short.com", _quote(), ttl=5)
    cache.set("R0", "long.com", _quote())

    fake_clock.advance(10)
    assert cache.get("R0", "short.com") is None
    assert cache.get("R0", "long.com") is not None


def test_non_positive_ttl_is_not_stored(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock)
    cache.set("R0", "example.com", _quote(), ttl=0)
    assert cache.get("R0", "example.com") is None


def test_last_writer_wins(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock)
    cache.set("R0", "example.com", _quote(price=10.0))
    cache.set("R0", "example.com", _quote(price=7.5))

    cached = cache.get("R0", "example.com")
    assert cached is not None
    assert cached.price == 7.5


def test_purge_expired_and_clear(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock)
    cache.set("R0", "old.com", _quote(), ttl=1)
    cache.set("R0", "new.com", _quote())

    fake_clock.advance(2)
    assert cache.purge_expired() == 1
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_invalid_default_ttl() -> None:
    with pytest.raises(ValueError):
        QuoteCache(0)


def test_concurrent_writers_and_readers() -> None:
    cache = QuoteCache(60)
    errors: list[BaseException] = []

    def worker(n: int) -> None:
        try:
            for i in range(200):
                domain = f"d{i % 20}.com"
                cache.set(f"R{n % 3}", domain, _quote(f"R{n % 3}", float(i)))
                cache.get(f"R{(n + 1) % 3}", domain)
        except BaseException as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(cache) == 60


def test_set_sweeps_expired_entries_past_max_entries(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock, max_entries=3)
    for i in range(3):
        cache.set("R0", f"old{i}.com", _quote(), ttl=1)

    fake_clock.advance(5)
    cache.set("R0", "fresh.com", _quote())

    assert len(cache) == 1
    assert cache.get("R0", "fresh.com") is not None


def test_live_entries_survive_the_sweep(fake_clock) -> None:
    cache = QuoteCache(60, clock=fake_clock, max_entries=2)
    for i in range(4):
        cache.set("R0", f"live{i}.com", _quote())

    assert len(cache) == 4
