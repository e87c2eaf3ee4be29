"""FastAPI application factory.

Services are built once per process (registry, cache, pipeline) and shared
through `app.state`; tests inject their own aggregator/suggester.
"""

from __future__ import annotations

from fastapi import FastAPI

from adapters.ai_suggester import OpenAISuggester
from api.errors import register_exception_handlers
from api.routes import router
from core.config import AppSettings, get_settings
from core.interfaces.suggester import SuggestionProvider
from core.logging import get_logger
from core.services.aggregator import Aggregator
from core.services.bulk_pipeline import BulkPipeline
from core.services.quote_cache import QuoteCache
from core.services.registry import build_default_registry
from core.services.search import SearchService

log = get_logger(__name__)


def build_aggregator(settings: AppSettings) -> Aggregator:
    return Aggregator(
        build_default_registry(settings),
        QuoteCache(settings.cache_ttl_seconds),
        default_currency=settings.default_currency,
    )


def create_app(
    *,
    settings: AppSettings | None = None,
    aggregator: Aggregator | None = None,
    suggester: SuggestionProvider | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    aggregator = aggregator or build_aggregator(settings)

    app = FastAPI(title="domain-scout", version="0.1.0")
    app.state.settings = settings
    app.state.aggregator = aggregator
    app.state.bulk_pipeline = BulkPipeline(
        aggregator,
        chunk_size=settings.bulk_chunk_size,
        max_domains=settings.bulk_max_domains,
    )
    app.state.search_service = SearchService(aggregator, suggester or OpenAISuggester(settings))

    register_exception_handlers(app)
    app.include_router(router)
    log.info(
        "app ready with registrars: %s",
        ", ".join(aggregator.registry.names()),
    )
    return app
