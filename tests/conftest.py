"""Pytest fixtures for provider-based architecture."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from app.core.config import get_settings
from app.infrastructure.providers.typeahead_provider import reset_typeahead_providers


@pytest.fixture(autouse=True)
def reset_provider_state() -> Iterator[None]:
    """Ensure each test starts with fresh settings and provider singletons."""
    get_settings.cache_clear()
    reset_typeahead_providers()
    yield
    get_settings.cache_clear()
    reset_typeahead_providers()


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
