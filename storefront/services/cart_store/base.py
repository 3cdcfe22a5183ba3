"""
Key-Value Store Abstract Base Class

Durable client-side storage used by the cart. Values are opaque bytes;
the cart engine decides the encoding. Implementations:

    - InMemoryKeyValueStore: process-local dict (tests, ephemeral sessions)
    - FileKeyValueStore: JSON document on disk guarded by a file lock
    - RedisKeyValueStore: shared Redis instance

Backend failures are raised as ``CartStoreError`` so callers handle a single
exception type regardless of the backend.
"""

from abc import ABC, abstractmethod
from typing import Optional


class CartStoreError(Exception):
    """The backing store could not be read or written."""


class BaseKeyValueStore(ABC):
    """Abstract base class for key-value stores."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the backend name."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or ``None`` when the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the key. Removing an absent key is not an error."""
        pass

    def health_check(self) -> bool:
        """Check that the store can be read."""
        try:
            self.get("__health__")
            return True
        except CartStoreError:
            return False
