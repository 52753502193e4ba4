"""Domain service for scoring and ordering typeahead suggestions."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Pattern, Sequence

import structlog

from app.domain.value_objects import RankedSuggestion, Suggestion

logger = structlog.get_logger(__name__)

EXACT_MATCH_SCORE = 100.0
PREFIX_MATCH_SCORE = 90.0
WORD_MATCH_SCORE = 80.0
SUBSTRING_MATCH_SCORE = 70.0

FUZZY_SIMILARITY_THRESHOLD = 0.6
FUZZY_SCORE_MULTIPLIER = 60.0

DEFAULT_LIMIT = 5
DEFAULT_MIN_CHARACTERS = 2

_ASCII_WORD_CHAR = r"[A-Za-z0-9_]"
_UNICODE_WORD_CHAR = r"\w"


def normalize_text(value: Optional[str]) -> str:
    """Case-fold a candidate or query for comparison. Whitespace is kept."""
    if not value:
        return ""
    return value.lower()


def is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def levenshtein(a: str, b: str) -> int:
    """
    Edit distance between ``a`` and ``b``.

    Insertions, deletions and substitutions each cost 1. Uses a
    (len(b)+1) x (len(a)+1) table.
    """
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]

    for i in range(len(b) + 1):
        matrix[i][0] = i
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            cost = 0 if b[i - 1] == a[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,         # deletion
                matrix[i][j - 1] + 1,         # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )

    return matrix[len(b)][len(a)]


class IRelevanceRanker(ABC):
    """Domain service interface for typeahead relevance ranking."""

    @abstractmethod
    def score(self, candidate_text: str, query: str) -> float:
        """Score one candidate against a query. Zero means no match."""
        pass

    @abstractmethod
    def rank(
        self,
        candidates: Sequence[Suggestion],
        query: str,
        limit: int = DEFAULT_LIMIT,
        min_characters: int = DEFAULT_MIN_CHARACTERS
    ) -> List[RankedSuggestion]:
        """Score, filter, order and truncate candidates for a query."""
        pass


class RelevanceRanker(IRelevanceRanker):
    """
    Tiered relevance ranking with an edit-distance fallback.

    Tiers are exclusive and evaluated in order, first match wins:

    1. exact match (100)
    2. prefix match (90)
    3. whole-word match (80)
    4. substring match (70)
    5. fuzzy match: ``similarity * fuzzy_multiplier`` when
       ``similarity > fuzzy_threshold``, otherwise no match

    The ranker holds no mutable state and can be shared freely.
    """

    def __init__(
        self,
        fuzzy_threshold: float = FUZZY_SIMILARITY_THRESHOLD,
        fuzzy_multiplier: float = FUZZY_SCORE_MULTIPLIER,
        unicode_word_boundaries: bool = False
    ):
        self.fuzzy_threshold = fuzzy_threshold
        self.fuzzy_multiplier = fuzzy_multiplier
        self.unicode_word_boundaries = unicode_word_boundaries
        self._word_char = _UNICODE_WORD_CHAR if unicode_word_boundaries else _ASCII_WORD_CHAR

    @classmethod
    def from_settings(cls, settings) -> "RelevanceRanker":
        return cls(
            fuzzy_threshold=settings.FUZZY_SIMILARITY_THRESHOLD,
            fuzzy_multiplier=settings.FUZZY_SCORE_MULTIPLIER,
            unicode_word_boundaries=settings.UNICODE_WORD_BOUNDARIES
        )

    def score(self, candidate_text: str, query: str) -> float:
        text = normalize_text(candidate_text)
        q = normalize_text(query)

        if is_blank(text) or is_blank(q):
            return 0.0

        if text == q:
            return EXACT_MATCH_SCORE

        if text.startswith(q):
            return PREFIX_MATCH_SCORE

        if self._word_pattern(q).search(text):
            return WORD_MATCH_SCORE

        if q in text:
            return SUBSTRING_MATCH_SCORE

        return self.fuzzy_score(text, q)

    def fuzzy_score(self, text: str, query: str) -> float:
        """Score from normalized edit-distance similarity, 0 below threshold."""
        max_len = max(len(text), len(query))
        if max_len == 0:
            return 0.0

        similarity = (max_len - levenshtein(text, query)) / max_len
        if similarity > self.fuzzy_threshold:
            return similarity * self.fuzzy_multiplier
        return 0.0

    def rank(
        self,
        candidates: Sequence[Suggestion],
        query: str,
        limit: int = DEFAULT_LIMIT,
        min_characters: int = DEFAULT_MIN_CHARACTERS
    ) -> List[RankedSuggestion]:
        if is_blank(query) or len(query) < min_characters:
            return []

        if limit <= 0:
            return []

        seen_ids = set()
        ranked: List[RankedSuggestion] = []

        for candidate in candidates:
            if candidate.id in seen_ids:
                logger.debug("Duplicate suggestion id dropped", suggestion_id=candidate.id)
                continue
            seen_ids.add(candidate.id)

            relevance = self.score(candidate.text, query)
            if relevance <= 0:
                continue

            ranked.append(RankedSuggestion(suggestion=candidate, relevance_score=relevance))

        # sorted() is stable, so ties keep their input order
        ranked = sorted(ranked, key=lambda r: r.relevance_score, reverse=True)

        return ranked[:limit]

    def _word_pattern(self, query: str) -> Pattern[str]:
        w = self._word_char
        return re.compile(f"(?<!{w}){re.escape(query)}(?!{w})")
