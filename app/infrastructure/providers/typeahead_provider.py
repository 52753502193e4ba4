"""
Typeahead Provider

Wires settings, directory adapters, the relevance ranker and a per-instance
suggestion cache into ready-to-use SearchTypeahead instances.
"""

from typing import Any, Callable, Optional
import httpx
import structlog

from app.application.typeahead_service import SearchTypeahead, TypeaheadConfig
from app.core.config import Settings, get_settings
from app.domain.services.relevance_ranker import RelevanceRanker
from app.domain.value_objects import Suggestion
from app.infrastructure.adapters.faq_search_adapter import (
    FaqSearchAdapter,
    build_faq_search_adapter,
)
from app.infrastructure.adapters.user_search_adapter import (
    UserSearchAdapter,
    build_user_search_adapter,
)
from app.infrastructure.providers.cache_provider import create_suggestion_cache

logger = structlog.get_logger(__name__)

_user_search_adapter: Optional[UserSearchAdapter] = None
_faq_search_adapter: Optional[FaqSearchAdapter] = None


def get_user_search_adapter(client: Optional[httpx.AsyncClient] = None) -> UserSearchAdapter:
    """
    Provide the shared user search adapter.

    Singleton pattern - the adapter is stateless apart from its HTTP client.
    """
    global _user_search_adapter

    if _user_search_adapter is None:
        _user_search_adapter = build_user_search_adapter(get_settings(), client=client)
        logger.info("User search adapter initialized", url=_user_search_adapter.url)

    return _user_search_adapter


def get_faq_search_adapter(client: Optional[httpx.AsyncClient] = None) -> FaqSearchAdapter:
    """Provide the shared FAQ search adapter."""
    global _faq_search_adapter

    if _faq_search_adapter is None:
        _faq_search_adapter = build_faq_search_adapter(get_settings(), client=client)
        logger.info("FAQ search adapter initialized", url=_faq_search_adapter.url)

    return _faq_search_adapter


def create_typeahead(
    provider: Any = None,
    candidates: Optional[list] = None,
    settings: Optional[Settings] = None,
    **callbacks: Optional[Callable[..., Any]]
) -> SearchTypeahead:
    """
    Build a typeahead from settings.

    Every typeahead gets its own cache; ``callbacks`` accepts ``on_change``,
    ``on_commit`` and ``on_clear``.
    """
    settings = settings or get_settings()
    config = TypeaheadConfig.from_settings(settings)

    return SearchTypeahead(
        provider=provider,
        candidates=candidates,
        ranker=RelevanceRanker.from_settings(settings),
        cache=create_suggestion_cache(
            max_age_ms=config.cache_max_age_ms,
            max_entries=config.cache_max_entries
        ),
        config=config,
        **callbacks
    )


def create_user_typeahead(settings: Optional[Settings] = None, **callbacks) -> SearchTypeahead:
    """Typeahead over dashboard users (name, email, role)."""
    return create_typeahead(provider=get_user_search_adapter(), settings=settings, **callbacks)


def create_faq_typeahead(settings: Optional[Settings] = None, **callbacks) -> SearchTypeahead:
    """Typeahead over FAQ questions."""
    return create_typeahead(provider=get_faq_search_adapter(), settings=settings, **callbacks)


def create_static_typeahead(
    candidates: list,
    settings: Optional[Settings] = None,
    **callbacks
) -> SearchTypeahead:
    """Typeahead ranking a fixed list of suggestions without any provider."""
    return create_typeahead(
        candidates=[c if isinstance(c, Suggestion) else Suggestion(**c) for c in candidates],
        settings=settings,
        **callbacks
    )


def reset_typeahead_providers() -> None:
    """Reset cached adapters (useful for tests)."""
    global _user_search_adapter, _faq_search_adapter
    _user_search_adapter = None
    _faq_search_adapter = None
