"""Domain value objects used by the typeahead core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SuggestionCategory(str, Enum):
    """Display grouping for a suggestion. Never used for ranking."""

    NAME = "name"
    EMAIL = "email"
    ROLE = "role"
    QUESTION = "question"
    CATEGORY = "category"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def _coerce_category(value: Any) -> Optional[SuggestionCategory]:
    """Convert strings to SuggestionCategory members while validating type."""
    if value is None or isinstance(value, SuggestionCategory):
        return value
    if isinstance(value, str):
        return SuggestionCategory(value.lower())
    raise TypeError("category must be a SuggestionCategory or string")


@dataclass(frozen=True)
class Suggestion:
    """
    One candidate completion offered while the user types.

    ``text`` may be empty when built from loose source records; such
    suggestions are never ranked.
    """

    id: str
    text: str
    category: Optional[SuggestionCategory] = None

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Suggestion id must be a non-empty string")
        if self.text is None:
            object.__setattr__(self, "text", "")
        elif not isinstance(self.text, str):
            raise TypeError("Suggestion text must be a string")
        object.__setattr__(self, "category", _coerce_category(self.category))

    @property
    def label(self) -> str:
        """Category label shown next to the suggestion, empty when untagged."""
        return self.category.label if self.category else ""


@dataclass(frozen=True)
class RankedSuggestion:
    """A suggestion paired with its relevance score for one query."""

    suggestion: Suggestion
    relevance_score: float

    def __post_init__(self):
        if not 0.0 < self.relevance_score <= 100.0:
            raise ValueError("Relevance score must be in (0, 100]")

    @property
    def id(self) -> str:
        return self.suggestion.id

    @property
    def text(self) -> str:
        return self.suggestion.text

    @property
    def category(self) -> Optional[SuggestionCategory]:
        return self.suggestion.category
