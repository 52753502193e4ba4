"""Suggestion cache provider."""

from __future__ import annotations

from typing import Callable, Optional

from app.domain.interfaces import ISuggestionCache
from app.infrastructure.adapters.suggestion_cache_adapter import (
    DEFAULT_MAX_AGE_MS,
    DEFAULT_MAX_ENTRIES,
    SuggestionCache,
)


def create_suggestion_cache(
    max_age_ms: int = DEFAULT_MAX_AGE_MS,
    max_entries: int = DEFAULT_MAX_ENTRIES,
    clock: Optional[Callable[[], float]] = None,
) -> ISuggestionCache:
    """
    Build a fresh cache for one typeahead.

    Caches are not singletons: each typeahead owns its own instance.
    """
    return SuggestionCache(max_age_ms=max_age_ms, max_entries=max_entries, clock=clock)
