from __future__ import annotations

import pytest

from core.domain.errors import InputError
from core.domain.models import RegistrarQuote
from core.services.aggregator import Aggregator, pick_best_offer, rank_quotes
from core.services.quote_cache import QuoteCache
from core.services.registry import AdapterRegistry


def _assert_ranked(quotes: list[RegistrarQuote]) -> None:
    seen_unavailable = False
    for quote in quotes:
        if not quote.available:
            seen_unavailable = True
        else:
            assert not seen_unavailable, "available quote after an unavailable one"
    available_prices = [q.price for q in quotes if q.available and q.price is not None]
    assert available_prices == sorted(available_prices)


@pytest.mark.asyncio
async def test_best_offer_is_cheapest_available(scenario_aggregator, scenario_registrars) -> None:
    result = await scenario_aggregator.compare_prices("free.com")

    assert result.domain == "free.com"
    assert result.available is True
    assert len(result.quotes) == len(scenario_registrars)
    assert result.best_offer is not None
    assert result.best_offer.registrar == "R3"
    assert result.best_offer.price == 8.03
    assert [q.price for q in result.quotes] == [8.03, 9.73, 10.49, 12.98, 14.99]


@pytest.mark.asyncio
async def test_domain_is_normalized_before_fan_out(scenario_aggregator, scenario_registrars) -> None:
    result = await scenario_aggregator.compare_prices("  FREE.com ")

    assert result.domain == "free.com"
    assert all(r.calls == ["free.com"] for r in scenario_registrars)


@pytest.mark.asyncio
async def test_one_failing_adapter_does_not_break_the_rest(make_registrar) -> None:
    registrars = [
        make_registrar("Ok", price=11.0),
        make_registrar("Raises", raises=RuntimeError("connection reset")),
        make_registrar("Errors", error="rate_limited"),
        make_registrar("Missing", configured=False),
    ]
    result = await Aggregator(AdapterRegistry(registrars)).compare_prices("mixed.com")

    by_name = {q.registrar: q for q in result.quotes}
    assert set(by_name) == {"Ok", "Raises", "Errors", "Missing"}
    assert by_name["Raises"].error == "connection reset"
    assert by_name["Raises"].available is False
    assert by_name["Errors"].error == "rate_limited"
    assert by_name["Missing"].configured is False
    assert result.best_offer is not None
    assert result.best_offer.registrar == "Ok"
    assert result.quotes[0].registrar == "Ok"


@pytest.mark.asyncio
async def test_nothing_available_means_no_best_offer(make_registrar) -> None:
    registrars = [
        make_registrar("A", available=False, price=9.0),
        make_registrar("B", error="timeout"),
    ]
    result = await Aggregator(AdapterRegistry(registrars)).compare_prices("taken.com")

    assert result.available is False
    assert result.best_offer is None
    assert len(result.quotes) == 2


@pytest.mark.asyncio
async def test_available_without_price_has_no_best_offer(make_registrar) -> None:
    registrars = [make_registrar("A", available=True, price=None)]
    result = await Aggregator(AdapterRegistry(registrars)).compare_prices("free.com")

    assert result.available is True
    assert result.best_offer is None


@pytest.mark.asyncio
async def test_repeat_calls_within_ttl_hit_the_cache(make_registrar, fake_clock) -> None:
    registrar = make_registrar("A", price=9.0)
    aggregator = Aggregator(AdapterRegistry([registrar]), QuoteCache(60, clock=fake_clock))

    first = await aggregator.compare_prices("free.com")
    fake_clock.advance(30)
    second = await aggregator.compare_prices("free.com")

    assert registrar.calls == ["free.com"]
    assert first.model_dump() == second.model_dump()


@pytest.mark.asyncio
async def test_expired_entries_trigger_a_fresh_check(make_registrar, fake_clock) -> None:
    registrar = make_registrar("A", price=9.0)
    aggregator = Aggregator(AdapterRegistry([registrar]), QuoteCache(60, clock=fake_clock))

    await aggregator.compare_prices("free.com")
    fake_clock.advance(61)
    await aggregator.compare_prices("free.com")

    assert registrar.calls == ["free.com", "free.com"]


@pytest.mark.asyncio
async def test_error_quotes_are_not_cached(make_registrar) -> None:
    flaky = make_registrar("Flaky", error="timeout")
    aggregator = Aggregator(AdapterRegistry([flaky]))

    await aggregator.compare_prices("free.com")
    await aggregator.compare_prices("free.com")

    assert flaky.calls == ["free.com", "free.com"]


@pytest.mark.asyncio
async def test_adapter_can_opt_into_caching_errors(make_registrar) -> None:
    flaky = make_registrar("Flaky", error="timeout")
    flaky.cache_errors = True
    aggregator = Aggregator(AdapterRegistry([flaky]))

    await aggregator.compare_prices("free.com")
    await aggregator.compare_prices("free.com")

    assert flaky.calls == ["free.com"]


@pytest.mark.asyncio
async def test_adapter_cache_ttl_is_honored(make_registrar, fake_clock) -> None:
    short = make_registrar("Short", price=5.0)
    short.cache_ttl = 10
    aggregator = Aggregator(AdapterRegistry([short]), QuoteCache(300, clock=fake_clock))

    await aggregator.compare_prices("free.com")
    fake_clock.advance(11)
    await aggregator.compare_prices("free.com")

    assert len(short.calls) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", ["", "   ", "not a domain", "nodot"])
async def test_invalid_domain_raises_input_error_without_calls(bad, scenario_aggregator, scenario_registrars) -> None:
    with pytest.raises(InputError):
        await scenario_aggregator.compare_prices(bad)
    assert all(r.calls == [] for r in scenario_registrars)


def test_rank_quotes_orders_available_then_price() -> None:
    quotes = [
        RegistrarQuote(registrar="taken", available=False, price=1.0),
        RegistrarQuote(registrar="unpriced", available=True),
        RegistrarQuote(registrar="cheap", available=True, price=3.0),
        RegistrarQuote.failure("broken", "timeout"),
        RegistrarQuote(registrar="pricey", available=True, price=30.0),
    ]
    ranked = rank_quotes(quotes)

    assert [q.registrar for q in ranked] == ["cheap", "pricey", "unpriced", "taken", "broken"]
    _assert_ranked(ranked)


def test_pick_best_offer_defaults_currency() -> None:
    quotes = [RegistrarQuote(registrar="A", available=True, price=4.0, currency=None)]
    best = pick_best_offer(quotes, default_currency="EUR")

    assert best is not None
    assert best.currency == "EUR"


def test_degraded_result_has_one_error_quote_per_adapter(scenario_aggregator, scenario_registrars) -> None:
    result = scenario_aggregator.degraded_result("free.com", "TimeoutError")

    assert len(result.quotes) == len(scenario_registrars)
    assert all(q.error == "TimeoutError" for q in result.quotes)
    assert result.available is False
    assert result.best_offer is None
