"""Domain layer package exposing pure business abstractions."""

from . import interfaces
from .value_objects import RankedSuggestion, Suggestion, SuggestionCategory

__all__ = [
    "interfaces",
    "RankedSuggestion",
    "Suggestion",
    "SuggestionCategory",
]
