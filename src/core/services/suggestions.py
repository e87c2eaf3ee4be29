"""Deterministic local name suggestions.

Used whenever the remote suggestion provider is unavailable (no API key,
network failure, malformed output), so a search always returns something.
"""

from __future__ import annotations

import re

from core.domain.models import DomainSuggestion, SearchQuery, SuggestionCategory

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def keyword_base(query: SearchQuery) -> str:
    first = query.keywords[0] if query.keywords else ""
    base = _NON_ALNUM_RE.sub("", first.lower())
    return base or "example"


def heuristic_suggestions(query: SearchQuery) -> list[DomainSuggestion]:
    base = keyword_base(query)
    return [
        DomainSuggestion(
            domain=f"{base}ai.com",
            confidence=0.92,
            reasoning="Short, tech-forward variant suitable for AI brands.",
            category=SuggestionCategory.EXACT,
        ),
        DomainSuggestion(
            domain=f"get{base}.com",
            confidence=0.86,
            reasoning="Action-oriented prefix that's memorable and brandable.",
            category=SuggestionCategory.BRANDABLE,
        ),
        DomainSuggestion(
            domain=f"{base}hub.io",
            confidence=0.8,
            reasoning="Modern TLD signaling a developer- or data-centric hub.",
            category=SuggestionCategory.COMPOUND,
        ),
    ]
