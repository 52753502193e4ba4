"""
Admin Search Typeahead - relevance-ranked search-as-you-type for the admin dashboard.

This package provides the typeahead core used to search dashboard users and
FAQs: tiered relevance ranking with a fuzzy fallback, a bounded expiring
suggestion cache, and an asyncio orchestrator with last-request-wins
cancellation.
"""

__version__ = "1.0.0"
