"""Error taxonomy of the core.

Only *input* errors escape to callers. Registrar failures are represented as
degraded quotes and never raised; anything else is a system error handled at
the outermost boundary (HTTP handlers, CLI).
"""

from __future__ import annotations


class DomainScoutError(Exception):
    """Base class for errors raised by this project."""


class InputError(DomainScoutError, ValueError):
    """Malformed or empty input, detected before any network work starts."""


class SuggestionError(DomainScoutError):
    """The suggestion provider returned nothing usable."""
