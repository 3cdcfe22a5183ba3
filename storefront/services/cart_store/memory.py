"""
In-Memory Key-Value Store

Used in development mode and throughout the test suite. Contents live only
as long as the instance.
"""

from typing import Optional

from storefront.services.cart_store.base import BaseKeyValueStore


class InMemoryKeyValueStore(BaseKeyValueStore):
    """Dict-backed store."""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._data: dict[str, bytes] = dict(initial or {})

    @property
    def provider_name(self) -> str:
        return "memory"

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
