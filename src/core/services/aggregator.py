"""Registrar aggregation: fan one domain out to every backend and rank.

This is the only place that talks to adapters. It consults the quote cache
first, isolates each backend's failure into a degraded quote and merges the
results into an `AggregatedResult`.
"""

from __future__ import annotations

import asyncio
import math
from typing import Iterable, Sequence

from pydantic import ValidationError

from core.domain.errors import InputError
from core.domain.models import AggregatedResult, BestOffer, DomainQuery, RegistrarQuote
from core.interfaces.registrar import RegistrarAdapter
from core.logging import get_logger
from core.services.quote_cache import QuoteCache
from core.services.registry import AdapterRegistry

log = get_logger(__name__)


def _price_or_inf(quote: RegistrarQuote) -> float:
    return quote.price if quote.price is not None else math.inf


def rank_quotes(quotes: Iterable[RegistrarQuote]) -> list[RegistrarQuote]:
    """Available quotes first, then by ascending price (missing price last).

    The sort is stable, so ties keep registry order.
    """

    return sorted(quotes, key=lambda q: (0 if q.available else 1, _price_or_inf(q)))


def pick_best_offer(
    quotes: Iterable[RegistrarQuote],
    *,
    default_currency: str = "USD",
) -> BestOffer | None:
    """Cheapest quote that is both available and priced, if any."""

    candidates = [q for q in quotes if q.available and q.price is not None]
    if not candidates:
        return None
    best = min(candidates, key=_price_or_inf)
    return BestOffer(
        registrar=best.registrar,
        price=best.price,
        currency=best.currency or default_currency,
    )


def build_result(
    domain: str,
    quotes: Sequence[RegistrarQuote],
    *,
    default_currency: str = "USD",
) -> AggregatedResult:
    ranked = rank_quotes(quotes)
    return AggregatedResult(
        domain=domain,
        available=any(q.available for q in ranked),
        best_offer=pick_best_offer(ranked, default_currency=default_currency),
        quotes=ranked,
    )


def coerce_domain(domain: str | DomainQuery) -> DomainQuery:
    if isinstance(domain, DomainQuery):
        return domain
    try:
        return DomainQuery(name=domain)
    except ValidationError as exc:
        raise InputError(f"Invalid domain: {domain!r}") from exc


class Aggregator:
    """Compares prices for one domain across all registered backends."""

    def __init__(
        self,
        registry: AdapterRegistry,
        cache: QuoteCache | None = None,
        *,
        default_currency: str = "USD",
    ) -> None:
        self.registry = registry
        self.cache = cache if cache is not None else QuoteCache()
        self.default_currency = default_currency

    async def compare_prices(self, domain: str | DomainQuery) -> AggregatedResult:
        """Quote `domain` on every adapter concurrently and rank the results.

        Raises `InputError` only when `domain` is not a valid name; adapter
        failures always come back as degraded quotes.
        """

        query = coerce_domain(domain)
        quotes = await asyncio.gather(
            *(self._quote(adapter, query.name) for adapter in self.registry.all())
        )
        return build_result(query.name, quotes, default_currency=self.default_currency)

    async def _quote(self, adapter: RegistrarAdapter, domain: str) -> RegistrarQuote:
        cached = self.cache.get(adapter.name, domain)
        if cached is not None:
            return cached

        try:
            quote = await adapter.check(domain)
        except Exception as exc:  # noqa: BLE001 - adapters must not break the fan-out
            log.warning(
                "registrar check raised: %s",
                exc,
                extra={"registrar": adapter.name, "domain": domain},
            )
            return RegistrarQuote.failure(adapter.name, str(exc) or type(exc).__name__)

        if quote.error is not None:
            log.debug(
                "registrar returned error %s",
                quote.error,
                extra={"registrar": adapter.name, "domain": domain},
            )
        if quote.ok or adapter.cache_errors:
            self.cache.set(adapter.name, domain, quote, ttl=adapter.cache_ttl)
        return quote

    def degraded_result(self, domain: str, error: str) -> AggregatedResult:
        """Result used when pricing a domain failed outside the adapters."""

        quotes = [RegistrarQuote.failure(adapter.name, error) for adapter in self.registry.all()]
        return build_result(domain, quotes, default_currency=self.default_currency)
