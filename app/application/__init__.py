"""Application layer entry points.

Holds orchestrators that coordinate domain logic with adapters.
"""

from .typeahead_service import SearchTypeahead, TypeaheadConfig, TypeaheadState

__all__ = [
    "SearchTypeahead",
    "TypeaheadConfig",
    "TypeaheadState",
]
