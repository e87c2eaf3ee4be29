"""Contrato del proveedor de sugerencias (servicio externo de completado de texto)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import DomainSuggestion, SearchQuery


@runtime_checkable
class SuggestionProvider(Protocol):
    async def suggest(self, query: SearchQuery) -> list[DomainSuggestion]:
        """Devuelve 1-10 nombres candidatos. Los fallos caen al heurístico, nunca se propagan."""

        ...
