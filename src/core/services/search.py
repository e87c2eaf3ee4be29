"""Name search: ask the suggestion provider, then price every candidate."""

from __future__ import annotations

import asyncio
import time

from core.domain.errors import InputError
from core.domain.models import DomainSuggestion, SearchQuery, SearchResult
from core.domain.names import is_valid_domain, normalize_domain
from core.interfaces.suggester import SuggestionProvider
from core.logging import get_logger
from core.services.aggregator import Aggregator
from core.services.suggestions import heuristic_suggestions

log = get_logger(__name__)

MAX_SUGGESTIONS = 10


def build_insights(query: SearchQuery) -> str:
    return (
        f'Based on your keywords "{", ".join(query.keywords)}", prioritize memorability '
        "and clarity. Favor .com when available; otherwise consider .io/.ai."
    )


class SearchService:
    def __init__(self, aggregator: Aggregator, suggester: SuggestionProvider) -> None:
        self.aggregator = aggregator
        self.suggester = suggester

    async def search(self, query: SearchQuery) -> SearchResult:
        if not query.keywords:
            raise InputError("Keywords are required")

        start = time.perf_counter()
        suggestions = await self._suggest(query)
        priced = await asyncio.gather(*(self._enrich(s) for s in suggestions))

        return SearchResult(
            query=query,
            suggestions=list(priced),
            total_results=len(priced),
            search_time=round(time.perf_counter() - start, 3),
            ai_insights=build_insights(query),
        )

    async def _suggest(self, query: SearchQuery) -> list[DomainSuggestion]:
        try:
            suggestions = await self.suggester.suggest(query)
        except Exception as exc:  # noqa: BLE001 - the end user never sees provider faults
            log.warning("suggestion provider failed, using heuristic: %s", exc)
            suggestions = []
        if not suggestions:
            suggestions = heuristic_suggestions(query)
        return suggestions[:MAX_SUGGESTIONS]

    async def _enrich(self, suggestion: DomainSuggestion) -> DomainSuggestion:
        domain = normalize_domain(suggestion.domain)
        if not is_valid_domain(domain):
            return suggestion
        result = await self.aggregator.compare_prices(domain)
        return suggestion.model_copy(
            update={
                "domain": domain,
                "available": result.available,
                "best_offer": result.best_offer,
                "pricing": result.quotes,
            }
        )
