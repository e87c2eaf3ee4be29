"""Bulk pricing pipeline.

Turns free-form input (pasted text, an uploaded file's content or an explicit
list) into a deduplicated, capped domain set, then drives the aggregator over
it in fixed-size chunks:

- chunks run one after another;
- inside a chunk every domain is priced concurrently and the whole chunk is
  awaited before the next one starts.

Peak concurrency is therefore `chunk_size` domains (times the number of
registrars), and total latency is roughly `len(domains) / chunk_size` times
the slowest domain. Once a chunk has started it runs to completion.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence, TypeVar, Union

from core.domain.errors import InputError
from core.domain.models import AggregatedResult, BulkReport
from core.domain.names import dedupe_domains, extract_domains
from core.logging import get_logger
from core.services.aggregator import Aggregator

log = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 8
DEFAULT_MAX_DOMAINS = 500

BulkInput = Union[str, Sequence[str]]

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of `items`, order preserved."""

    if size < 1:
        raise ValueError("chunk size must be >= 1")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


@dataclass
class BulkHooks:
    """Optional callbacks for UI layers (progress bars)."""

    started: Callable[[int], None] | None = None
    chunk_done: Callable[[int, int], None] | None = None


class BulkPipeline:
    def __init__(
        self,
        aggregator: Aggregator,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_domains: int = DEFAULT_MAX_DOMAINS,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        if max_domains < 1:
            raise ValueError("max_domains must be >= 1")
        self.aggregator = aggregator
        self.chunk_size = chunk_size
        self.max_domains = max_domains

    def extract(self, raw: BulkInput | None) -> list[str]:
        """Domain set for `raw`: text is tokenized, lists are normalized.

        Either way tokens are lowercased, filtered by domain shape, deduped in
        first-seen order and capped at `max_domains`.
        """

        if raw is None:
            return []
        if isinstance(raw, str):
            return extract_domains(raw, limit=self.max_domains)
        return dedupe_domains(raw, limit=self.max_domains)

    async def process_bulk(
        self,
        raw: BulkInput | None,
        *,
        hooks: BulkHooks | None = None,
    ) -> BulkReport:
        """Price every domain found in `raw`.

        Raises `InputError` before any network call if no domain was found.
        """

        hooks = hooks or BulkHooks()
        domains = self.extract(raw)
        if not domains:
            raise InputError("No domains provided")

        log.info(
            "bulk start: %d domains in chunks of %d",
            len(domains),
            self.chunk_size,
            extra={"total": len(domains), "chunk_size": self.chunk_size},
        )
        if hooks.started:
            hooks.started(len(domains))

        start = time.perf_counter()
        results: list[AggregatedResult] = []
        for chunk in chunked(domains, self.chunk_size):
            batch = await asyncio.gather(*(self._price_one(domain) for domain in chunk))
            results.extend(batch)
            if hooks.chunk_done:
                hooks.chunk_done(len(results), len(domains))

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            "bulk finished: %d/%d domains in %d ms",
            len(results),
            len(domains),
            duration_ms,
            extra={"processed": len(results), "duration_ms": duration_ms},
        )
        return BulkReport(
            total=len(domains),
            processed=len(results),
            duration_ms=duration_ms,
            results=results,
        )

    async def _price_one(self, domain: str) -> AggregatedResult:
        try:
            return await self.aggregator.compare_prices(domain)
        except Exception as exc:  # noqa: BLE001 - one domain must not sink the batch
            log.exception("pricing failed for %s", domain, extra={"domain": domain})
            return self.aggregator.degraded_result(domain, type(exc).__name__)
