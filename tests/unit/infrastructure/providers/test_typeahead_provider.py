"""
Tests for typeahead provider wiring.

Covers adapter singletons, settings-driven construction and an end-to-end
lookup against a mocked directory API.
"""

import httpx
import pytest

from app.application.typeahead_service import SearchTypeahead
from app.core.config import Settings
from app.infrastructure.adapters.faq_search_adapter import FaqSearchAdapter
from app.infrastructure.adapters.user_search_adapter import UserSearchAdapter
from app.infrastructure.providers.cache_provider import create_suggestion_cache
from app.infrastructure.providers.typeahead_provider import (
    create_faq_typeahead,
    create_static_typeahead,
    create_typeahead,
    create_user_typeahead,
    get_faq_search_adapter,
    get_user_search_adapter,
    reset_typeahead_providers,
)


def _directory_client() -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/users.json":
            return httpx.Response(200, json={"users": [
                {"id": "1", "name": "John Doe", "email": "john@example.com", "role": "admin"},
                {"id": "2", "name": "Bob Johnson", "email": "bob@example.com", "role": "editor"},
                {"id": "3", "name": "Jane Smith", "email": "jane@example.com", "role": "user"},
            ]})
        return httpx.Response(200, json={"faqs": [
            {"id": "f1", "question": "How do I reset my password?", "answer": "", "category": "Account"},
        ]})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestAdapterSingletons:

    def test_user_adapter_built_from_settings(self, monkeypatch):
        monkeypatch.setenv("DIRECTORY_API_BASE_URL", "http://directory.internal")
        monkeypatch.setenv("DIRECTORY_AUTH_TOKEN", "token-123")
        monkeypatch.setenv("USER_SEARCH_MAX_RESULTS", "4")

        adapter = get_user_search_adapter()

        assert isinstance(adapter, UserSearchAdapter)
        assert adapter.url == "http://directory.internal/api/users.json"
        assert adapter.auth_token == "token-123"
        assert adapter.max_results == 4

    def test_adapters_are_shared(self):
        assert get_user_search_adapter() is get_user_search_adapter()
        assert get_faq_search_adapter() is get_faq_search_adapter()
        assert isinstance(get_faq_search_adapter(), FaqSearchAdapter)

    def test_reset_drops_singletons(self):
        first = get_user_search_adapter()

        reset_typeahead_providers()

        assert get_user_search_adapter() is not first


class TestTypeaheadFactories:

    def test_create_typeahead_applies_settings(self):
        settings = Settings(
            TYPEAHEAD_MIN_CHARACTERS=3,
            TYPEAHEAD_MAX_SUGGESTIONS=4,
            TYPEAHEAD_CACHE_MAX_ENTRIES=7,
            TYPEAHEAD_HIDE_EXACT_MATCH=True,
            FUZZY_SIMILARITY_THRESHOLD=0.7,
        )

        typeahead = create_typeahead(candidates=[], settings=settings)

        assert isinstance(typeahead, SearchTypeahead)
        assert typeahead.config.min_characters == 3
        assert typeahead.config.max_suggestions == 4
        assert typeahead.config.hide_exact_match is True
        assert typeahead.cache.get_stats()["max_entries"] == 7
        assert typeahead.ranker.fuzzy_threshold == 0.7

    def test_each_typeahead_owns_its_cache(self):
        assert create_typeahead().cache is not create_typeahead().cache

    def test_static_typeahead_accepts_dicts(self):
        typeahead = create_static_typeahead([
            {"id": "r1", "text": "admin", "category": "role"},
            {"id": "r2", "text": "editor", "category": "role"},
        ])

        typeahead.on_input_change("adm")

        assert [s.id for s in typeahead.suggestions] == ["r1"]
        assert typeahead.suggestions[0].category.label == "Role"

    def test_callbacks_are_forwarded(self):
        seen = []
        typeahead = create_static_typeahead(
            [{"id": "r1", "text": "admin"}], on_change=seen.append
        )

        typeahead.on_input_change("ad")

        assert seen == ["ad"]

    def test_cache_provider_returns_fresh_instances(self):
        assert create_suggestion_cache() is not create_suggestion_cache()


class TestDirectoryTypeaheads:

    @pytest.mark.asyncio
    async def test_user_typeahead_end_to_end(self):
        async with _directory_client() as client:
            get_user_search_adapter(client=client)
            typeahead = create_user_typeahead()

            await typeahead.on_input_change("jo")

        assert [s.text for s in typeahead.suggestions] == [
            "John Doe (john@example.com)",
            "Bob Johnson (bob@example.com)",
        ]
        assert typeahead.suggestions[0].category.label == "Name"

    @pytest.mark.asyncio
    async def test_faq_typeahead_end_to_end(self):
        async with _directory_client() as client:
            get_faq_search_adapter(client=client)
            typeahead = create_faq_typeahead()

            await typeahead.on_input_change("reset")

        assert [s.id for s in typeahead.suggestions] == ["f1"]
        assert typeahead.suggestions[0].relevance_score == 80.0

    @pytest.mark.asyncio
    async def test_directory_failure_degrades_to_error_state(self):
        def handler(request):
            return httpx.Response(503)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            get_user_search_adapter(client=client)
            typeahead = create_user_typeahead()

            await typeahead.on_input_change("jo")

        assert typeahead.suggestions == []
        assert typeahead.state.value == "error"
        assert "HTTP 503" in str(typeahead.last_error)
