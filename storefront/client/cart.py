"""
Cart Engine

Holds the customer's cart lines and keeps them in the injected key-value
store under the ``"cart"`` key as a JSON array of CartItem objects.

Every mutation writes the whole cart back to the store. ``sync()`` re-reads
it, which is what the storefront does each time the customer returns to the
home screen so that a cart cleared by the checkout flow is picked up.

Amounts are integer minor units throughout; ``format_price`` is the only
place that produces major units, and only as display text.
"""

import logging
from typing import Iterable, Iterator, Optional

from pydantic import TypeAdapter, ValidationError

from storefront.schemas import CartItem, MenuItemResponse
from storefront.services.cart_store import BaseKeyValueStore, CartStoreError

logger = logging.getLogger(__name__)

CART_KEY = "cart"

_cart_adapter = TypeAdapter(list[CartItem])


def compute_subtotal(items: Iterable[CartItem]) -> int:
    """Sum of ``price * quantity`` over all lines, in minor units."""
    return sum(item.menu_item.price * item.quantity for item in items)


def format_price(amount: int, currency: str = "$") -> str:
    """Render minor units as ``{currency}{major}.{minor:02}``."""
    major, minor = divmod(amount, 100)
    return f"{currency}{major}.{minor:02d}"


def encode_cart(items: Iterable[CartItem]) -> bytes:
    return _cart_adapter.dump_json(list(items), by_alias=True, exclude_none=True)


def decode_cart(raw: Optional[bytes]) -> list[CartItem]:
    """Parse a stored cart; missing or malformed data yields an empty cart."""
    if not raw:
        return []
    try:
        return _cart_adapter.validate_json(raw)
    except (ValidationError, ValueError) as e:
        logger.warning(f"Discarding unreadable cart data: {e}")
        return []


class CartEngine:
    """
    Single-session cart.

    Lines are addressed by position; edits replace a line in place so the
    order customers see never shifts.

    Attributes:
        store: Durable key-value store the cart is persisted to
        key: Store key holding the cart
    """

    def __init__(self, store: BaseKeyValueStore, key: str = CART_KEY):
        self.store = store
        self.key = key
        self._items: list[CartItem] = self.restore()

    # =========================================================================
    # READ
    # =========================================================================

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def subtotal(self) -> int:
        return compute_subtotal(self._items)

    @property
    def total_items(self) -> int:
        """Number of units across all lines (the cart badge count)."""
        return sum(item.quantity for item in self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> CartItem:
        return self._items[index]

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def add_or_update(
        self,
        item: MenuItemResponse,
        quantity: int,
        note: Optional[str] = None,
        edit_index: Optional[int] = None,
    ) -> int:
        """
        Add a line, or replace the line at ``edit_index`` when it is valid.

        Args:
            item: Menu item snapshot
            quantity: Units, at least 1
            note: Free-text instructions for the kitchen
            edit_index: Position of the line being edited

        Returns:
            Position of the written line

        Raises:
            ValueError: If quantity is not a positive integer or the item
                is unavailable
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"Quantity must be a positive integer, got {quantity!r}")
        if not item.is_available:
            raise ValueError(f"'{item.name}' is not available")

        line = CartItem(menu_item=item, quantity=quantity, note=note)

        if edit_index is not None and 0 <= edit_index < len(self._items):
            self._items[edit_index] = line
            position = edit_index
        else:
            self._items.append(line)
            position = len(self._items) - 1

        logger.debug(f"Cart line {position}: {item.name} x{quantity}")
        self.persist()
        return position

    def remove(self, index: int) -> None:
        """Remove the line at ``index``; out-of-range indices are ignored."""
        if not 0 <= index < len(self._items):
            logger.debug(f"Ignoring remove of missing cart line {index}")
            return
        del self._items[index]
        self.persist()

    def clear(self) -> None:
        """Empty the cart and delete the stored record."""
        self._items = []
        try:
            self.store.remove(self.key)
        except CartStoreError as e:
            logger.warning(f"Could not delete stored cart: {e}")

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def persist(self) -> None:
        """Write the whole cart to the store. Failures are logged, not raised."""
        try:
            self.store.set(self.key, encode_cart(self._items))
        except CartStoreError as e:
            logger.warning(f"Could not persist cart: {e}")

    def restore(self) -> list[CartItem]:
        """Read the stored cart without changing the in-memory one."""
        try:
            raw = self.store.get(self.key)
        except CartStoreError as e:
            logger.warning(f"Could not read stored cart: {e}")
            return []
        return decode_cart(raw)

    def sync(self) -> list[CartItem]:
        """Replace the in-memory cart with the stored one."""
        self._items = self.restore()
        return self.items
