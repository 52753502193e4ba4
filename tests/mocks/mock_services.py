"""
Mock suggestion providers for testing.

These mocks implement ISuggestionProvider and let tests decide exactly when
(and in which order) each provider call resolves.
"""

import asyncio
from typing import Dict, List, Sequence

from app.domain.interfaces import ISuggestionProvider
from app.domain.value_objects import Suggestion


class ControlledSuggestionProvider(ISuggestionProvider):
    """Provider whose calls stay pending until the test resolves them."""

    def __init__(self):
        self.calls: List[str] = []
        self.pending: Dict[str, asyncio.Future] = {}

    async def fetch_suggestions(self, query: str) -> List[Suggestion]:
        self.calls.append(query)
        future = asyncio.get_running_loop().create_future()
        self.pending[query] = future
        return await self._wait(future)

    async def _wait(self, future: asyncio.Future) -> List[Suggestion]:
        return await future

    def resolve(self, query: str, results: Sequence[Suggestion]) -> bool:
        """Complete the call for ``query``. False when it was already cancelled."""
        future = self.pending[query]
        if future.done():
            return False
        future.set_result(list(results))
        return True

    def fail(self, query: str, error: BaseException) -> bool:
        future = self.pending[query]
        if future.done():
            return False
        future.set_exception(error)
        return True


class CancellationIgnoringProvider(ControlledSuggestionProvider):
    """
    Provider that keeps waiting after being cancelled.

    Models a backend client that cannot be aborted, so a stale response can
    still arrive after a newer request was issued.
    """

    async def _wait(self, future: asyncio.Future) -> List[Suggestion]:
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            return await future


def make_suggestions(*texts: str, prefix: str = "s") -> List[Suggestion]:
    return [Suggestion(id=f"{prefix}{i}", text=text) for i, text in enumerate(texts)]
