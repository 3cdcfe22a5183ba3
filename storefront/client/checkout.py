"""
Checkout Message Composer

Turns the cart into the WhatsApp order text and the ``wa.me`` deep link
that carries it. Opening the link belongs to the host (browser tab, kiosk
shell); the composer only builds strings.

Message layout::

    *{restaurant} - New Order*

    *Order Details:*

    1. *{item}*
       Quantity: {qty}
       Price: {currency}{line total}
       Note: {note}

    *Total: {currency}{subtotal}*
"""

import logging
import re
from typing import Any, Callable, Optional, Sequence
from urllib.parse import quote

from storefront.client.cart import CartEngine, compute_subtotal, format_price
from storefront.client.store_settings import StoreSettings
from storefront.core.config import get_settings
from storefront.schemas import CartItem

logger = logging.getLogger(__name__)

STOREFRONT_ROOT = "/"

# Characters JavaScript's encodeURIComponent leaves untouched (besides alphanumerics)
_URI_COMPONENT_SAFE = "-_.!~*'()"


class EmptyCartError(ValueError):
    """An order message was requested for an empty cart."""


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def compose_order_message(
    items: Sequence[CartItem],
    settings: Optional[StoreSettings] = None,
) -> str:
    """
    Render the cart as the order text sent to the restaurant.

    Args:
        items: Cart lines, in cart order
        settings: Resolved settings; defaults are used when omitted

    Raises:
        EmptyCartError: If there are no lines
    """
    if not items:
        raise EmptyCartError("Cannot compose an order for an empty cart")

    settings = settings or StoreSettings.resolve()
    currency = settings.currency

    message = f"*{settings.restaurant_name} - New Order*\n\n"
    message += "*Order Details:*\n"

    for number, item in enumerate(items, start=1):
        message += f"\n{number}. *{item.menu_item.name}*\n"
        message += f"   Quantity: {item.quantity}\n"
        message += f"   Price: {format_price(item.line_total, currency)}\n"
        if item.note:
            message += f"   Note: {item.note}\n"

    message += f"\n*Total: {format_price(compute_subtotal(items), currency)}*"
    return message


def build_order_link(
    message: str,
    whatsapp_number: str,
    base_url: Optional[str] = None,
) -> str:
    """``{base}/{digits}?text={encoded message}``; non-digits are stripped from the number."""
    base_url = (base_url or get_settings().whatsapp_base_url).rstrip("/")
    digits = re.sub(r"\D", "", whatsapp_number)
    return f"{base_url}/{digits}?text={encode_uri_component(message)}"


class CheckoutFlow:
    """
    Checkout screen logic.

    The flow reads the persisted cart on entry, redirects home whenever the
    cart is empty, and clears the cart exactly once after the order link has
    been handed to ``opener`` without error.

    Attributes:
        cart: The customer's cart
        settings: Resolved restaurant settings
        opener: Opens the deep link (e.g. ``webbrowser.open``)
        navigate: Route changer used for the redirect home
    """

    def __init__(
        self,
        cart: CartEngine,
        settings: StoreSettings,
        opener: Callable[[str], Any],
        navigate: Optional[Callable[[str], Any]] = None,
        base_url: Optional[str] = None,
    ):
        self.cart = cart
        self.settings = settings
        self.opener = opener
        self.navigate = navigate
        self.base_url = base_url
        self.redirected = False

    def _redirect_home(self) -> None:
        self.redirected = True
        logger.info("Cart is empty; redirecting to the storefront")
        if self.navigate is not None:
            self.navigate(STOREFRONT_ROOT)

    def enter(self) -> bool:
        """
        Route entry hook.

        Returns:
            True when the checkout can be shown, False after redirecting home
        """
        self.cart.sync()
        if self.cart.is_empty:
            self._redirect_home()
            return False
        return True

    @property
    def subtotal(self) -> int:
        return self.cart.subtotal

    def order_message(self) -> str:
        return compose_order_message(self.cart.items, self.settings)

    def order_link(self) -> str:
        return build_order_link(self.order_message(), self.settings.whatsapp_number, self.base_url)

    def send_order(self) -> Optional[str]:
        """
        Hand the order link to the opener and clear the cart.

        Returns:
            The link that was opened, or None when the cart was empty

        Raises:
            Whatever ``opener`` raises; the cart is left intact in that case
        """
        if self.cart.is_empty:
            self._redirect_home()
            return None

        link = self.order_link()
        self.opener(link)
        logger.info(f"Order dispatched ({len(self.cart)} lines, {format_price(self.subtotal, self.settings.currency)})")

        self.cart.clear()
        self._redirect_home()
        return link
