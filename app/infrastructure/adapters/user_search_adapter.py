"""
User Search Adapter

Suggestion provider backed by the dashboard's users.json document.
"""

from typing import Any, Dict, List, Optional

import structlog

from app.domain.value_objects import Suggestion, SuggestionCategory
from app.infrastructure.adapters.directory_search_adapter import DirectorySearchAdapter
from app.models.directory import UserRecord, UsersDocument

logger = structlog.get_logger(__name__)

DEFAULT_MAX_RESULTS = 8


class UserSearchAdapter(DirectorySearchAdapter):
    """
    Searches users by name, email or role.

    Each match becomes a ``"{name} ({email})"`` suggestion tagged as a name.
    """

    document_path = "/api/users.json"
    resource_name = "users"

    def __init__(self, base_url: str, *, max_results: int = DEFAULT_MAX_RESULTS, **kwargs):
        super().__init__(base_url, **kwargs)
        self.max_results = max_results

    async def search_users(self, query: str) -> List[UserRecord]:
        """Return the first ``max_results`` users matching the query."""
        payload = await self._fetch_document(query)
        return self._filter(self._parse(UsersDocument, payload, query), query)

    def to_suggestions(self, payload: Dict[str, Any], query: str) -> List[Suggestion]:
        users = self._filter(self._parse(UsersDocument, payload, query), query)

        logger.debug("Users matched", query=query, count=len(users))

        return [
            Suggestion(
                id=user.id,
                text=f"{user.name} ({user.email})",
                category=SuggestionCategory.NAME
            )
            for user in users
        ]

    def _filter(self, document: UsersDocument, query: str) -> List[UserRecord]:
        matches = [user for user in document.users if user.matches(query)]
        return matches[:self.max_results]


def build_user_search_adapter(settings, client: Optional[Any] = None) -> UserSearchAdapter:
    return UserSearchAdapter(
        settings.DIRECTORY_API_BASE_URL,
        client=client,
        timeout_seconds=settings.DIRECTORY_API_TIMEOUT_SECONDS,
        auth_token=settings.DIRECTORY_AUTH_TOKEN,
        max_results=settings.USER_SEARCH_MAX_RESULTS
    )
