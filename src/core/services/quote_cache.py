"""In-process, time-bounded memoization of registrar quotes.

Keyed by (registrar, domain). The store is private: callers only see
`get`/`set`, and "expired" is indistinguishable from "absent".

Concurrency:
- A single lock guards the map, so it is safe from concurrent asyncio tasks
  and from worker threads alike.
- The last writer for a key wins. A read that finds an expired entry removes
  it under the same lock, so a concurrent `set` is never lost and concurrent
  removals of the same key are harmless.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from core.domain.models import RegistrarQuote
from core.logging import get_logger

log = get_logger(__name__)

DEFAULT_TTL_SECONDS = 60.0
DEFAULT_MAX_ENTRIES = 10_000


@dataclass(frozen=True)
class _CacheEntry:
    value: RegistrarQuote
    expires_at: float


class QuoteCache:
    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._store: dict[tuple[str, str], _CacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(backend: str, domain: str) -> tuple[str, str]:
        return backend.strip().lower(), domain.strip().lower()

    def get(self, backend: str, domain: str) -> RegistrarQuote | None:
        key = self._key(backend, domain)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                log.debug("cache miss %s:%s", *key)
                return None
            # Entries stay valid up to and including their expiry instant.
            if self._clock() > entry.expires_at:
                self._store.pop(key, None)
                log.debug("cache expired %s:%s", *key)
                return None
            log.debug("cache hit %s:%s", *key)
            return entry.value

    def set(
        self,
        backend: str,
        domain: str,
        quote: RegistrarQuote,
        ttl: float | None = None,
    ) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            return
        key = self._key(backend, domain)
        now = self._clock()
        with self._lock:
            self._store[key] = _CacheEntry(value=quote, expires_at=now + ttl)
            # Expired entries are otherwise only dropped when read again.
            if len(self._store) > self.max_entries:
                removed = self._purge_locked(now)
                log.debug("cache swept %d expired entries", removed)

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""

        with self._lock:
            return self._purge_locked(self._clock())

    def _purge_locked(self, now: float) -> int:
        stale = [k for k, e in self._store.items() if now > e.expires_at]
        for key in stale:
            del self._store[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
