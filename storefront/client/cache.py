"""
Read cache for catalog queries.

Entries are keyed by API path. Staleness is tolerated: a cached value is
served until something invalidates it, which every mutation of the
corresponding collection does before refetching.
"""

import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class QueryCache:
    def __init__(self):
        self._entries: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str, default: Any = None) -> Any:
        return self._entries.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    async def fetch(self, key: str, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for ``key``, calling ``fetcher`` on a miss."""
        if key in self._entries:
            return self._entries[key]
        value = await fetcher()
        self._entries[key] = value
        return value

    def invalidate(self, *keys: str) -> None:
        for key in keys:
            if self._entries.pop(key, None) is not None:
                logger.debug(f"Invalidated {key}")
