"""
Cart Store Factory

Provides a single entry point for obtaining the cart's key-value store.
The backend is chosen by ``CART_STORE_BACKEND`` (memory / file / redis).

Usage:
    from storefront.services.cart_store import get_cart_store

    store = get_cart_store()
    store.set("cart", b"[]")
"""

import logging
from functools import lru_cache

from storefront.core.config import CartStoreBackend, get_settings
from storefront.services.cart_store.base import BaseKeyValueStore, CartStoreError
from storefront.services.cart_store.file import FileKeyValueStore
from storefront.services.cart_store.memory import InMemoryKeyValueStore
from storefront.services.cart_store.redis_store import RedisKeyValueStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_cart_store() -> BaseKeyValueStore:
    """
    Get the configured cart store instance.

    The instance is cached so every cart in the process shares one store.

    Returns:
        BaseKeyValueStore: Configured store
    """
    settings = get_settings()
    backend = settings.cart_store_backend

    if backend == CartStoreBackend.REDIS:
        logger.info("Cart Store: Using RedisKeyValueStore")
        return RedisKeyValueStore(settings.redis_url, key_prefix=settings.cart_store_key_prefix)
    if backend == CartStoreBackend.FILE:
        logger.info(f"Cart Store: Using FileKeyValueStore ({settings.cart_store_path})")
        return FileKeyValueStore(settings.cart_store_path, lock_timeout=settings.cart_store_lock_timeout)

    logger.info("Cart Store: Using InMemoryKeyValueStore")
    return InMemoryKeyValueStore()


def reset_cart_store() -> None:
    """Clear the cached store instance."""
    get_cart_store.cache_clear()


__all__ = [
    "get_cart_store",
    "reset_cart_store",
    "BaseKeyValueStore",
    "CartStoreError",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "RedisKeyValueStore",
]
