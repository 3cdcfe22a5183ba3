"""
Storefront client.

Customer cart and checkout, the home-screen browse flow, and the admin
list reordering, all talking to the server through ``StorefrontAPIClient``.
"""

from storefront.client.api import StorefrontAPIClient, StorefrontAPIError
from storefront.client.cache import QueryCache
from storefront.client.cart import CART_KEY, CartEngine, compute_subtotal, format_price
from storefront.client.catalog import ItemDetail, StorefrontSession, visible_menu_items
from storefront.client.checkout import (
    CheckoutFlow,
    EmptyCartError,
    build_order_link,
    compose_order_message,
)
from storefront.client.notices import Notice, NoticeBoard, NoticeLevel
from storefront.client.reorder import Direction, ListReorderEngine, ReorderState, compute_reordered_ids
from storefront.client.store_settings import StoreSettings

__all__ = [
    "CART_KEY",
    "CartEngine",
    "CheckoutFlow",
    "Direction",
    "EmptyCartError",
    "ItemDetail",
    "ListReorderEngine",
    "Notice",
    "NoticeBoard",
    "NoticeLevel",
    "QueryCache",
    "ReorderState",
    "StoreSettings",
    "StorefrontAPIClient",
    "StorefrontAPIError",
    "StorefrontSession",
    "build_order_link",
    "compose_order_message",
    "compute_reordered_ids",
    "compute_subtotal",
    "format_price",
    "visible_menu_items",
]
