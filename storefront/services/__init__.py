"""
                        Services Module

Backing services with swappable implementations, selected from settings.

Services:
    - cart_store: Key-value store behind the storefront cart (memory / file / redis)
"""

from storefront.services.cart_store import get_cart_store, reset_cart_store

__all__ = ["get_cart_store", "reset_cart_store"]
