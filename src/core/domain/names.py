"""Domain-name parsing helpers.

Shared by the bulk pipeline (token extraction), the HTTP layer and
`DomainQuery` validation, so every entry point agrees on what a domain is.
"""

from __future__ import annotations

import re
from typing import Iterable

MAX_DOMAIN_LENGTH = 253

# One or more labels (alnum/hyphen, no leading or trailing hyphen, <= 63 chars)
# followed by an alphabetic TLD of at least two letters.
DOMAIN_RE = re.compile(r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,}$")

_TOKEN_SPLIT_RE = re.compile(r"[\s,;]+")


def normalize_domain(value: str) -> str:
    return value.strip().lower()


def is_valid_domain(value: str) -> bool:
    """Check an already-normalized value against the domain shape."""

    if not value or len(value) > MAX_DOMAIN_LENGTH:
        return False
    return DOMAIN_RE.match(value) is not None


def split_domain(value: str) -> tuple[str, str]:
    """Split `name.tld` into (sld, tld). Multi-label suffixes stay in the tld."""

    sld, _, tld = value.partition(".")
    return sld, tld


def dedupe_domains(values: Iterable[str], *, limit: int | None = None) -> list[str]:
    """Normalize, keep valid names only, dedupe preserving first-seen order, cap."""

    seen: set[str] = set()
    out: list[str] = []
    for raw in values:
        if not isinstance(raw, str):
            continue
        domain = normalize_domain(raw)
        if domain in seen or not is_valid_domain(domain):
            continue
        seen.add(domain)
        out.append(domain)
        if limit is not None and len(out) >= limit:
            break
    return out


def tokenize(text: str) -> list[str]:
    return [t for t in _TOKEN_SPLIT_RE.split(text or "") if t]


def extract_domains(text: str, *, limit: int | None = None) -> list[str]:
    """Pull domain-like tokens out of free text.

    >>> extract_domains("visit example.com or Mybrand.IO now")
    ['example.com', 'mybrand.io']
    """

    return dedupe_domains(tokenize(text), limit=limit)
