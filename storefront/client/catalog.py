"""
Storefront browse flow.

``StorefrontSession`` is the home screen: it loads the catalog, tracks the
active category, lists the items customers may see, and opens the item
detail draft that feeds the cart. ``ItemDetail`` is that draft: a quantity
with a floor of 1 and an optional note.
"""

import logging
from typing import Any, Callable, Optional

from storefront.client.api import StorefrontAPIClient
from storefront.client.cache import QueryCache
from storefront.client.cart import CartEngine, format_price
from storefront.client.checkout import CheckoutFlow
from storefront.client.store_settings import StoreSettings
from storefront.schemas import BannerResponse, CategoryResponse, MenuItemResponse

logger = logging.getLogger(__name__)


def visible_menu_items(
    items: list[MenuItemResponse],
    category_id: Optional[str] = None,
) -> list[MenuItemResponse]:
    """Items a customer may see: never hidden ones, optionally one category only."""
    return [
        item for item in items
        if not item.is_hidden and (category_id is None or item.category_id == category_id)
    ]


class ItemDetail:
    """Quantity/note draft for one menu item, new or editing an existing cart line."""

    def __init__(
        self,
        item: MenuItemResponse,
        cart: CartEngine,
        quantity: int = 1,
        note: str = "",
        edit_index: Optional[int] = None,
    ):
        self.item = item
        self.cart = cart
        self.quantity = max(1, quantity)
        self.note = note
        self.edit_index = edit_index

    @property
    def is_editing(self) -> bool:
        return self.edit_index is not None

    def increment(self) -> int:
        self.quantity += 1
        return self.quantity

    def decrement(self) -> int:
        self.quantity = max(1, self.quantity - 1)
        return self.quantity

    def set_quantity(self, quantity: int) -> int:
        self.quantity = max(1, int(quantity))
        return self.quantity

    @property
    def line_total(self) -> int:
        return self.item.price * self.quantity

    def confirm(self) -> int:
        """Write the draft to the cart; returns the line position."""
        return self.cart.add_or_update(
            self.item,
            self.quantity,
            self.note or None,
            edit_index=self.edit_index,
        )


class StorefrontSession:
    """
    Customer-facing home screen state.

    Attributes:
        client: API client
        cart: The customer's cart
        cache: Read cache shared with other screens
    """

    def __init__(
        self,
        client: StorefrontAPIClient,
        cart: CartEngine,
        cache: Optional[QueryCache] = None,
    ):
        self.client = client
        self.cart = cart
        self.cache = cache or QueryCache()
        self.categories: list[CategoryResponse] = []
        self.menu_items: list[MenuItemResponse] = []
        self.banners: list[BannerResponse] = []
        self.settings: StoreSettings = StoreSettings.resolve()
        self.active_category_id: Optional[str] = None

    async def load(self) -> None:
        """Fetch (or reuse cached) categories, items, banners and settings."""
        self.categories = await self.cache.fetch("/api/categories", self.client.get_categories)
        self.menu_items = await self.cache.fetch("/api/menu-items", self.client.get_menu_items)
        self.banners = await self.cache.fetch("/api/banners", self.client.get_banners)
        self.settings = await self.cache.fetch("/api/settings", self.client.get_settings)

        category_ids = {category.id for category in self.categories}
        if self.active_category_id not in category_ids:
            self.active_category_id = self.categories[0].id if self.categories else None

        logger.info(
            f"Catalog loaded: {len(self.categories)} categories, "
            f"{len(self.menu_items)} items, {len(self.banners)} banners"
        )

    def enter(self) -> None:
        """Returning to the storefront root: pick up cart changes made elsewhere."""
        self.cart.sync()

    # =========================================================================
    # BROWSING
    # =========================================================================

    def select_category(self, category_id: str) -> None:
        self.active_category_id = category_id

    @property
    def active_category(self) -> Optional[CategoryResponse]:
        return next((c for c in self.categories if c.id == self.active_category_id), None)

    def visible_items(self, category_id: Optional[str] = None) -> list[MenuItemResponse]:
        return visible_menu_items(self.menu_items, category_id)

    @property
    def active_items(self) -> list[MenuItemResponse]:
        if self.active_category_id is None:
            return []
        return self.visible_items(self.active_category_id)

    def price_label(self, amount: int) -> str:
        return format_price(amount, self.settings.currency)

    # =========================================================================
    # CART
    # =========================================================================

    def open_item(self, item: MenuItemResponse) -> Optional[ItemDetail]:
        """Start the add-to-cart flow; unavailable items never open it."""
        if not item.is_available:
            logger.debug(f"'{item.name}' is unavailable")
            return None
        return ItemDetail(item, self.cart)

    def edit_cart_entry(self, index: int) -> Optional[ItemDetail]:
        if not 0 <= index < len(self.cart):
            return None
        line = self.cart[index]
        return ItemDetail(
            line.menu_item,
            self.cart,
            quantity=line.quantity,
            note=line.note or "",
            edit_index=index,
        )

    def remove_cart_entry(self, index: int) -> None:
        self.cart.remove(index)

    @property
    def cart_count(self) -> int:
        return self.cart.total_items

    def checkout(
        self,
        opener: Callable[[str], Any],
        navigate: Optional[Callable[[str], Any]] = None,
    ) -> CheckoutFlow:
        return CheckoutFlow(self.cart, self.settings, opener=opener, navigate=navigate)
