"""
Directory Search Adapter

Shared HTTP plumbing for suggestion providers backed by the dashboard's
JSON directory documents (users.json, faqs.json).
"""

import time
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.domain.exceptions import ProviderError
from app.domain.interfaces import ISuggestionProvider
from app.domain.value_objects import Suggestion

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class DirectorySearchAdapter(ISuggestionProvider):
    """
    Base class for providers that download a directory document and filter
    it locally.

    Subclasses set ``document_path`` and ``resource_name`` and implement
    ``to_suggestions``. An ``httpx.AsyncClient`` may be injected; otherwise a
    short-lived client is opened per request.
    """

    document_path: str = ""
    resource_name: str = "directory"

    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 5.0,
        auth_token: Optional[str] = None,
        document_path: Optional[str] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout_seconds = timeout_seconds
        self.auth_token = auth_token
        if document_path is not None:
            self.document_path = document_path

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.document_path}"

    async def fetch_suggestions(self, query: str) -> List[Suggestion]:
        payload = await self._fetch_document(query)
        return self.to_suggestions(payload, query)

    def to_suggestions(self, payload: Dict[str, Any], query: str) -> List[Suggestion]:
        raise NotImplementedError

    def _parse(self, model: Type[M], payload: Dict[str, Any], query: str) -> M:
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning(
                "Malformed directory payload",
                resource=self.resource_name,
                url=self.url,
                error_count=e.error_count()
            )
            raise ProviderError(query, f"Malformed {self.resource_name} payload", e) from e

    async def _fetch_document(self, query: str) -> Dict[str, Any]:
        start_time = time.time()
        headers = {"Cookie": f"auth_token={self.auth_token}"} if self.auth_token else None

        try:
            if self.client is not None:
                response = await self.client.get(self.url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.get(self.url, headers=headers)

            response.raise_for_status()
            payload = response.json()

        except httpx.TimeoutException as e:
            logger.warning(
                "Directory request timeout",
                resource=self.resource_name,
                url=self.url,
                timeout_seconds=self.timeout_seconds
            )
            raise ProviderError(
                query, f"Request timeout after {self.timeout_seconds}s", e
            ) from e

        except httpx.HTTPStatusError as e:
            logger.warning(
                "Directory request rejected",
                resource=self.resource_name,
                url=self.url,
                status_code=e.response.status_code
            )
            raise ProviderError(
                query, f"Failed to search {self.resource_name}: HTTP {e.response.status_code}", e
            ) from e

        except httpx.HTTPError as e:
            logger.warning(
                "Directory connection error",
                resource=self.resource_name,
                url=self.url,
                error=str(e)
            )
            raise ProviderError(query, f"Failed to search {self.resource_name}", e) from e

        except ValueError as e:
            raise ProviderError(query, f"Invalid JSON from {self.resource_name} endpoint", e) from e

        if not isinstance(payload, dict):
            raise ProviderError(query, f"Unexpected {self.resource_name} payload shape")

        logger.debug(
            "Directory document fetched",
            resource=self.resource_name,
            url=self.url,
            response_time_ms=int((time.time() - start_time) * 1000)
        )
        return payload
