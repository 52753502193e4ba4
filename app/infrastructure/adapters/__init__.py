"""Infrastructure adapters for external services."""

from .suggestion_cache_adapter import CacheEntry, SuggestionCache
from .directory_search_adapter import DirectorySearchAdapter
from .user_search_adapter import UserSearchAdapter
from .faq_search_adapter import FaqSearchAdapter

__all__ = [
    # Cache
    "CacheEntry",
    "SuggestionCache",

    # Directory search
    "DirectorySearchAdapter",
    "UserSearchAdapter",
    "FaqSearchAdapter",
]
