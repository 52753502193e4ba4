"""
FAQ Search Adapter

Suggestion provider backed by the dashboard's faqs.json document.
"""

from typing import Any, Dict, List, Optional

from app.domain.value_objects import Suggestion, SuggestionCategory
from app.infrastructure.adapters.directory_search_adapter import DirectorySearchAdapter
from app.models.directory import FaqRecord, FaqsDocument


class FaqSearchAdapter(DirectorySearchAdapter):
    """Searches FAQs by question, answer or category."""

    document_path = "/api/faqs.json"
    resource_name = "FAQs"

    def __init__(self, base_url: str, *, max_results: Optional[int] = None, **kwargs):
        super().__init__(base_url, **kwargs)
        self.max_results = max_results

    async def search_faqs(self, query: str) -> List[FaqRecord]:
        payload = await self._fetch_document(query)
        return self._filter(self._parse(FaqsDocument, payload, query), query)

    def to_suggestions(self, payload: Dict[str, Any], query: str) -> List[Suggestion]:
        return [
            Suggestion(id=faq.id, text=faq.question, category=SuggestionCategory.QUESTION)
            for faq in self._filter(self._parse(FaqsDocument, payload, query), query)
        ]

    def _filter(self, document: FaqsDocument, query: str) -> List[FaqRecord]:
        matches = [faq for faq in document.faqs if faq.matches(query)]
        if self.max_results is not None:
            matches = matches[:self.max_results]
        return matches


def build_faq_search_adapter(settings, client: Optional[Any] = None) -> FaqSearchAdapter:
    return FaqSearchAdapter(
        settings.DIRECTORY_API_BASE_URL,
        client=client,
        timeout_seconds=settings.DIRECTORY_API_TIMEOUT_SECONDS,
        auth_token=settings.DIRECTORY_AUTH_TOKEN
    )
