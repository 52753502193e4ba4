"""Domain services package."""

from .relevance_ranker import IRelevanceRanker, RelevanceRanker, levenshtein

__all__ = [
    "IRelevanceRanker",
    "RelevanceRanker",
    "levenshtein",
]
