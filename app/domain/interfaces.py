"""Domain-layer service interfaces.

These abstractions define the stable contracts that the application layer relies on,
while infrastructure adapters provide concrete implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from app.domain.value_objects import Suggestion

T = TypeVar("T")


class ISuggestionProvider(ABC):
    """Asynchronous source of suggestion candidates for a query."""

    @abstractmethod
    async def fetch_suggestions(self, query: str) -> List[Suggestion]:
        """
        Return raw (unranked) candidates for ``query``.

        Implementations raise ProviderError on failure and let
        asyncio.CancelledError propagate when superseded.
        """
        pass


class ISuggestionCache(ABC, Generic[T]):
    """Short-lived memoization of provider results keyed by query."""

    key_prefix: str = "search_"

    @classmethod
    def make_key(cls, query: str) -> str:
        """Build the conventional cache key for a query."""
        return f"{cls.key_prefix}{query.lower()}"

    @abstractmethod
    def get(self, key: str) -> Optional[T]:
        """Return cached data, or None when absent or expired."""
        pass

    @abstractmethod
    def set(self, key: str, data: T) -> None:
        """Store data under key with a fresh timestamp."""
        pass

    @abstractmethod
    def has(self, key: str) -> bool:
        """Check for a live entry without touching hit/miss counters."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop all entries and reset counters."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Return hit/miss/eviction statistics."""
        pass


__all__ = [
    "ISuggestionProvider",
    "ISuggestionCache",
]
