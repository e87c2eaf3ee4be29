"""Memo asíncrono con TTL para consultas a servicios externos.

Por qué existe:
- Varios adaptadores preguntan lo mismo al mismo upstream (RDAP) y una tabla
  de precios sirve para todos los dominios; repetir la petición solo gasta
  cuota de rate limit.
- Llamadas concurrentes con la misma clave comparten una única petición en
  vuelo (request coalescing); el resultado correcto se sirve desde memoria
  hasta que vence su TTL.

Nota:
- Los fallos nunca se guardan: el siguiente llamante vuelve a intentarlo.
"""

from __future__ import annotations

import asyncio
import functools
import time
from typing import Callable, Coroutine, Generic, Hashable, TypeVar

T = TypeVar("T")

_MAX_ENTRIES = 4096


def _succeeded(task: asyncio.Task) -> bool:
    return not task.cancelled() and task.exception() is None


class AsyncTtlMemo(Generic[T]):
    def __init__(self, ttl: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._values: dict[Hashable, tuple[T, float]] = {}
        self._pending: dict[Hashable, asyncio.Task[T]] = {}

    async def get_or_fetch(self, key: Hashable, fetch: Callable[[], Coroutine[object, object, T]]) -> T:
        """Valor vigente para `key`; si no hay, ejecuta `fetch` (una vez por clave)."""

        entry = self._values.get(key)
        if entry is not None:
            value, expires_at = entry
            if self._clock() <= expires_at:
                return value
            self._values.pop(key, None)

        loop = asyncio.get_running_loop()
        task = self._pending.get(key)
        if task is None or task.get_loop() is not loop or (task.done() and not _succeeded(task)):
            task = loop.create_task(fetch())
            self._pending[key] = task
            task.add_done_callback(functools.partial(self._settle, key))
        # shield: cancelar a un llamante no cancela la petición compartida.
        return await asyncio.shield(task)

    def _settle(self, key: Hashable, task: asyncio.Task[T]) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        if not _succeeded(task):
            return
        self._values[key] = (task.result(), self._clock() + self.ttl)
        if len(self._values) > _MAX_ENTRIES:
            self.purge_expired()

    def purge_expired(self) -> int:
        now = self._clock()
        stale = [k for k, (_, expires_at) in self._values.items() if now > expires_at]
        for key in stale:
            del self._values[key]
        return len(stale)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)
