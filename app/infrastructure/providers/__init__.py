"""Infrastructure provider accessors package.

Note: typeahead factories are imported from
``app.infrastructure.providers.typeahead_provider`` directly, since they
depend on the application layer.
"""

from .cache_provider import create_suggestion_cache  # noqa: F401

__all__ = [
    "create_suggestion_cache",
]
