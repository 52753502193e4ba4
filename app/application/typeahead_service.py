"""
Typeahead Application Service

Orchestrates search-as-you-type: threshold gating, cached lookups, a single
in-flight provider call with cancellation of stale requests, relevance
ranking and keyboard-driven selection.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union
import structlog

from app.domain.exceptions import ProviderError, QueryCancelledError
from app.domain.interfaces import ISuggestionCache, ISuggestionProvider
from app.domain.services.relevance_ranker import IRelevanceRanker, RelevanceRanker
from app.domain.value_objects import RankedSuggestion, Suggestion
from app.infrastructure.providers.cache_provider import create_suggestion_cache

logger = structlog.get_logger(__name__)

ProviderCallable = Callable[[str], Union[Awaitable[Sequence[Suggestion]], Sequence[Suggestion]]]


class TypeaheadState(str, Enum):
    """Lifecycle states of a typeahead."""

    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    LOADING = "loading"
    SHOWING_RESULTS = "showing_results"
    ERROR = "error"


class TypeaheadKey(str, Enum):
    """Keys handled by keyboard navigation."""

    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


@dataclass
class TypeaheadConfig:
    """Tuning for one typeahead instance."""

    min_characters: int = 2
    max_suggestions: int = 5
    cache_max_age_ms: int = 300_000
    cache_max_entries: int = 50
    blur_grace_ms: int = 150
    hide_exact_match: bool = False

    def __post_init__(self):
        if self.min_characters < 0:
            raise ValueError("min_characters must not be negative")
        if self.max_suggestions <= 0:
            raise ValueError("max_suggestions must be greater than zero")
        if self.blur_grace_ms < 0:
            raise ValueError("blur_grace_ms must not be negative")

    @classmethod
    def from_settings(cls, settings) -> "TypeaheadConfig":
        return cls(
            min_characters=settings.TYPEAHEAD_MIN_CHARACTERS,
            max_suggestions=settings.TYPEAHEAD_MAX_SUGGESTIONS,
            cache_max_age_ms=settings.TYPEAHEAD_CACHE_MAX_AGE_MS,
            cache_max_entries=settings.TYPEAHEAD_CACHE_MAX_ENTRIES,
            blur_grace_ms=settings.TYPEAHEAD_BLUR_GRACE_MS,
            hide_exact_match=settings.TYPEAHEAD_HIDE_EXACT_MATCH
        )


@dataclass
class QueryState:
    """UI-facing state owned by a SearchTypeahead."""

    value: str = ""
    state: TypeaheadState = TypeaheadState.IDLE
    is_open: bool = False
    is_loading: bool = False
    highlighted_index: int = -1
    suggestions: List[RankedSuggestion] = field(default_factory=list)
    last_error: Optional[ProviderError] = None


class SearchTypeahead:
    """
    Application service driving one search box.

    Suggestions come either from an asynchronous provider (an
    ISuggestionProvider or a plain async callable) or, when none is
    configured, from a static candidate list. Provider results are cached
    per normalized query.

    At most one provider call is live: starting a new one cancels the
    previous task, and a response is applied only if it belongs to the most
    recent request for the current input (last request wins). Provider
    failures degrade to an empty, closed list and are never raised to the
    caller.

    Input, keyboard and focus handlers are synchronous and must be called
    from the running event loop; handlers that start background work return
    the asyncio.Task they scheduled.
    """

    def __init__(
        self,
        provider: Optional[Union[ISuggestionProvider, ProviderCallable]] = None,
        candidates: Optional[Sequence[Suggestion]] = None,
        *,
        ranker: Optional[IRelevanceRanker] = None,
        cache: Optional[ISuggestionCache] = None,
        config: Optional[TypeaheadConfig] = None,
        on_change: Optional[Callable[[str], Any]] = None,
        on_commit: Optional[Callable[[Suggestion], Any]] = None,
        on_clear: Optional[Callable[[], Any]] = None
    ):
        self.config = config or TypeaheadConfig()
        self.ranker = ranker or RelevanceRanker()
        self._cache = cache if cache is not None else create_suggestion_cache(
            max_age_ms=self.config.cache_max_age_ms,
            max_entries=self.config.cache_max_entries
        )
        self._fetch = self._resolve_provider(provider)
        self._candidates: List[Suggestion] = list(candidates or [])

        self._on_change = on_change
        self._on_commit = on_commit
        self._on_clear = on_clear

        self._state = QueryState()
        self._inflight: Optional[asyncio.Task] = None
        self._blur_task: Optional[asyncio.Task] = None
        self._request_id = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Read-only view for the embedding UI
    # ------------------------------------------------------------------

    @property
    def value(self) -> str:
        return self._state.value

    @property
    def suggestions(self) -> List[RankedSuggestion]:
        return list(self._state.suggestions)

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def highlighted_index(self) -> int:
        return self._state.highlighted_index

    @property
    def highlighted(self) -> Optional[RankedSuggestion]:
        index = self._state.highlighted_index
        if 0 <= index < len(self._state.suggestions):
            return self._state.suggestions[index]
        return None

    @property
    def state(self) -> TypeaheadState:
        return self._state.state

    @property
    def last_error(self) -> Optional[ProviderError]:
        return self._state.last_error

    @property
    def cache(self) -> ISuggestionCache:
        return self._cache

    @property
    def has_provider(self) -> bool:
        return self._fetch is not None

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def on_input_change(self, new_value: str) -> Optional[asyncio.Task]:
        """
        Handle a keystroke.

        The displayed value updates immediately. Returns the provider task
        when a lookup was started, otherwise None.
        """
        new_value = new_value or ""
        self._state.value = new_value
        if self._on_change:
            self._on_change(new_value)

        query = new_value

        if not self._meets_threshold(query):
            self._cancel_inflight()
            self._reset_results(
                TypeaheadState.AWAITING_INPUT if query else TypeaheadState.IDLE
            )
            return None

        if self._fetch is None:
            self._show(self._rank(self._candidates))
            return None

        key = self._cache.make_key(query)
        cached = self._cache.get(key)

        if cached is not None:
            self._cancel_inflight()
            logger.debug("Suggestions served from cache", query=query, count=len(cached))
            self._show(self._rank(cached))
            return None

        return self._start_request(query, key)

    def set_candidates(self, candidates: Sequence[Suggestion]) -> None:
        """Replace the static candidate list and refresh displayed results."""
        self._candidates = list(candidates)

        if self._fetch is None and self._meets_threshold(self._state.value):
            self._show(self._rank(self._candidates))

    def _start_request(self, query: str, key: str) -> asyncio.Task:
        self._cancel_inflight()

        self._request_id += 1
        request_id = self._request_id

        self._state.is_loading = True
        self._state.state = TypeaheadState.LOADING
        self._state.last_error = None

        task = asyncio.get_running_loop().create_task(
            self._run_provider(query, key, request_id)
        )
        self._inflight = task

        logger.debug("Suggestion request started", query=query, request_id=request_id)
        return task

    async def _run_provider(self, query: str, key: str, request_id: int) -> None:
        try:
            results = self._fetch(query)
            if inspect.isawaitable(results):
                results = await results

        except asyncio.CancelledError:
            logger.debug("Suggestion request cancelled", query=query, request_id=request_id)
            if self._is_current(query, request_id):
                self._end_loading()
            raise

        except QueryCancelledError:
            logger.debug("Suggestion request cancelled by provider", query=query, request_id=request_id)
            if self._is_current(query, request_id):
                self._end_loading()
            return

        except Exception as e:
            self._on_provider_error(query, request_id, e)
            return

        self._on_provider_resolve(query, key, request_id, results)

    def _on_provider_resolve(
        self,
        query: str,
        key: str,
        request_id: int,
        results: Sequence[Suggestion]
    ) -> None:
        if not self._is_current(query, request_id):
            logger.debug(
                "Stale suggestion response discarded",
                query=query,
                request_id=request_id,
                current_request_id=self._request_id
            )
            return

        raw = list(results or [])
        self._cache.set(key, raw)
        self._inflight = None

        self._show(self._rank(raw))

        logger.debug(
            "Suggestions resolved",
            query=query,
            total_found=len(raw),
            returned=len(self._state.suggestions)
        )

    def _on_provider_error(self, query: str, request_id: int, error: Exception) -> None:
        if not self._is_current(query, request_id):
            logger.debug("Stale suggestion failure ignored", query=query, error=str(error))
            return

        if not isinstance(error, ProviderError):
            error = ProviderError(query, str(error) or type(error).__name__, error)

        logger.error("Suggestion provider failed", query=query, error=str(error))

        self._inflight = None
        self._reset_results(TypeaheadState.ERROR)
        self._state.last_error = error

    def _is_current(self, query: str, request_id: int) -> bool:
        return (
            not self._closed
            and request_id == self._request_id
            and query == self._state.value
        )

    # ------------------------------------------------------------------
    # Keyboard, focus and commit handling
    # ------------------------------------------------------------------

    def on_key_down(self, key: Union[str, TypeaheadKey]) -> bool:
        """Handle navigation keys. Returns True when the key was consumed."""
        items = self._state.suggestions
        if not self._state.is_open or not items:
            return False

        index = self._state.highlighted_index

        if key == TypeaheadKey.ARROW_DOWN:
            self._state.highlighted_index = index + 1 if index < len(items) - 1 else 0
            return True

        if key == TypeaheadKey.ARROW_UP:
            self._state.highlighted_index = index - 1 if index > 0 else len(items) - 1
            return True

        if key == TypeaheadKey.ENTER:
            if 0 <= index < len(items):
                self.select(items[index])
            return True

        if key == TypeaheadKey.ESCAPE:
            self.close()
            return True

        return False

    def select(self, suggestion: Union[RankedSuggestion, Suggestion]) -> None:
        """Commit a suggestion into the search box."""
        chosen = suggestion.suggestion if isinstance(suggestion, RankedSuggestion) else suggestion

        self._cancel_blur()
        self._cancel_inflight()
        self._state.value = chosen.text
        self.close()

        if self._on_change:
            self._on_change(chosen.text)
        if self._on_commit:
            self._on_commit(chosen)

        logger.debug("Suggestion committed", suggestion_id=chosen.id)

    def close(self) -> None:
        """Close the dropdown without committing anything."""
        self._state.is_open = False
        self._state.highlighted_index = -1
        if self._state.state != TypeaheadState.LOADING:
            self._state.state = TypeaheadState.IDLE

    def clear(self) -> None:
        """Empty the search box and drop any pending lookup."""
        self._cancel_blur()
        self._cancel_inflight()
        self._state.value = ""
        self._reset_results(TypeaheadState.IDLE)

        if self._on_change:
            self._on_change("")
        if self._on_clear:
            self._on_clear()

    def on_focus(self) -> None:
        """Reopen the dropdown when there is something to show."""
        self._cancel_blur()
        if self._state.suggestions and self._meets_threshold(self._state.value):
            self._state.is_open = True
            if self._state.state != TypeaheadState.LOADING:
                self._state.state = TypeaheadState.SHOWING_RESULTS

    def on_blur(self, focus_in_dropdown: bool = False) -> asyncio.Task:
        """
        Close the dropdown after a short grace delay.

        The delay lets a click on a suggestion register first; nothing
        closes when focus moved into the dropdown itself.
        """
        self._cancel_blur()
        self._blur_task = asyncio.get_running_loop().create_task(
            self._close_after_grace(focus_in_dropdown)
        )
        return self._blur_task

    async def _close_after_grace(self, focus_in_dropdown: bool) -> None:
        await asyncio.sleep(self.config.blur_grace_ms / 1000.0)
        self._blur_task = None
        if not focus_in_dropdown:
            self.close()

    async def aclose(self) -> None:
        """Tear down: cancel outstanding work so no state changes afterwards."""
        self._closed = True
        pending = [t for t in (self._inflight, self._blur_task) if t is not None]
        self._cancel_inflight()
        self._cancel_blur()

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        logger.debug("Typeahead closed", cancelled=len(pending))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rank(self, candidates: Sequence[Suggestion]) -> List[RankedSuggestion]:
        limit = self.config.max_suggestions
        if self.config.hide_exact_match:
            # exact matches are filtered out below, so rank everything first
            limit = max(limit, len(candidates))

        ranked = self.ranker.rank(
            candidates,
            self._state.value,
            limit=limit,
            min_characters=self.config.min_characters
        )

        if self.config.hide_exact_match:
            typed = self._state.value.lower()
            ranked = [r for r in ranked if r.text.lower() != typed]

        return ranked[:self.config.max_suggestions]

    def _show(self, ranked: List[RankedSuggestion]) -> None:
        self._state.suggestions = ranked
        self._state.highlighted_index = -1
        self._state.is_loading = False
        self._state.last_error = None
        self._state.is_open = bool(ranked)
        self._state.state = TypeaheadState.SHOWING_RESULTS

    def _meets_threshold(self, value: str) -> bool:
        return bool(value.strip()) and len(value) >= self.config.min_characters

    def _end_loading(self) -> None:
        self._inflight = None
        self._state.is_loading = False
        self._state.state = TypeaheadState.IDLE

    def _reset_results(self, state: TypeaheadState) -> None:
        self._state.suggestions = []
        self._state.highlighted_index = -1
        self._state.is_loading = False
        self._state.is_open = False
        self._state.last_error = None
        self._state.state = state

    def _cancel_inflight(self) -> None:
        task = self._inflight
        self._inflight = None
        self._state.is_loading = False
        if self._state.state == TypeaheadState.LOADING:
            self._state.state = TypeaheadState.IDLE

        if task is not None and not task.done():
            task.cancel()
            logger.debug("In-flight suggestion request cancelled")

    def _cancel_blur(self) -> None:
        task = self._blur_task
        self._blur_task = None
        if task is not None and not task.done():
            task.cancel()

    @staticmethod
    def _resolve_provider(provider) -> Optional[ProviderCallable]:
        if provider is None:
            return None
        if isinstance(provider, ISuggestionProvider):
            return provider.fetch_suggestions
        if callable(provider):
            return provider
        raise TypeError("provider must be an ISuggestionProvider or a callable")
