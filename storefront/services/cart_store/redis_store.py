"""
Redis Key-Value Store

Shares the cart across storefront processes (kiosks behind one Redis).
Keys are namespaced with a configurable prefix.
"""

import logging
from typing import Optional

import redis

from storefront.services.cart_store.base import BaseKeyValueStore, CartStoreError

logger = logging.getLogger(__name__)


class RedisKeyValueStore(BaseKeyValueStore):
    """Redis-backed store."""

    def __init__(
        self,
        url: Optional[str] = None,
        key_prefix: str = "storefront:",
        client: Optional[redis.Redis] = None,
    ):
        self.key_prefix = key_prefix
        self.client = client or redis.Redis.from_url(url or "redis://localhost:6379/0", socket_timeout=2)
        logger.info(f"RedisKeyValueStore initialized (prefix={key_prefix!r})")

    @property
    def provider_name(self) -> str:
        return "redis"

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Optional[bytes]:
        try:
            return self.client.get(self._key(key))
        except redis.RedisError as e:
            raise CartStoreError(f"Redis read failed: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        try:
            self.client.set(self._key(key), value)
        except redis.RedisError as e:
            raise CartStoreError(f"Redis write failed: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.RedisError as e:
            raise CartStoreError(f"Redis delete failed: {e}") from e

    def health_check(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False
