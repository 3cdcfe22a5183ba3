"""
Tests for the checkout message composer and checkout flow.
"""
from urllib.parse import parse_qs, urlparse

import pytest

from storefront.client.cart import CartEngine
from storefront.client.checkout import (
    CheckoutFlow,
    EmptyCartError,
    build_order_link,
    compose_order_message,
    encode_uri_component,
)
from storefront.client.store_settings import StoreSettings
from storefront.services.cart_store import InMemoryKeyValueStore

EXPECTED_MESSAGE = (
    "*Mini's & Twennies - New Order*\n"
    "\n"
    "*Order Details:*\n"
    "\n"
    "1. *Margherita Pizza*\n"
    "   Quantity: 2\n"
    "   Price: $25.98\n"
    "   Note: Extra cheese please\n"
    "\n"
    "2. *Caesar Salad*\n"
    "   Quantity: 1\n"
    "   Price: $8.99\n"
    "\n"
    "*Total: $34.97*"
)


@pytest.fixture()
def settings():
    return StoreSettings.resolve({
        "restaurantName": "Mini's & Twennies",
        "whatsappNumber": "+1 (234) 567-890",
        "currency": "$",
    })


@pytest.fixture()
def cart(make_item):
    cart = CartEngine(InMemoryKeyValueStore())
    cart.add_or_update(make_item("Margherita Pizza", 1299, "pizza"), 2, "Extra cheese please")
    cart.add_or_update(make_item("Caesar Salad", 899, "salad"), 1)
    return cart


# ============= Message =============


class TestComposeOrderMessage:
    def test_exact_layout(self, cart, settings):
        assert compose_order_message(cart.items, settings) == EXPECTED_MESSAGE

    def test_no_note_line_without_note(self, cart, settings):
        message = compose_order_message(cart.items, settings)
        salad_block = message.split("2. *Caesar Salad*")[1]
        assert "Note:" not in salad_block

    def test_empty_note_is_omitted(self, make_item, settings):
        cart = CartEngine(InMemoryKeyValueStore())
        cart.add_or_update(make_item(), 1, "")
        assert "Note:" not in compose_order_message(cart.items, settings)

    def test_currency_symbol_is_used(self, cart):
        euro = StoreSettings.resolve({"restaurantName": "Bistro", "currency": "€"})
        message = compose_order_message(cart.items, euro)
        assert message.startswith("*Bistro - New Order*")
        assert "*Total: €34.97*" in message

    def test_empty_cart_raises(self, settings):
        with pytest.raises(EmptyCartError):
            compose_order_message([], settings)


# ============= Link =============


class TestBuildOrderLink:
    def test_link_targets_digits_only(self, cart, settings):
        link = build_order_link(compose_order_message(cart.items, settings), settings.whatsapp_number)
        parsed = urlparse(link)

        assert f"{parsed.scheme}://{parsed.netloc}" == "https://wa.me"
        assert parsed.path == "/1234567890"

    def test_text_decodes_to_message(self, cart, settings):
        message = compose_order_message(cart.items, settings)
        link = build_order_link(message, settings.whatsapp_number)
        assert parse_qs(urlparse(link).query)["text"] == [message]

    def test_encoding_matches_uri_component(self):
        assert encode_uri_component("Mini's & Twennies") == "Mini's%20%26%20Twennies"
        assert encode_uri_component("*Total: $1.00*\n") == "*Total%3A%20%241.00*%0A"

    def test_custom_base_url(self):
        link = build_order_link("hi", "99 887 766", base_url="https://api.whatsapp.com/send/")
        assert link == "https://api.whatsapp.com/send/99887766?text=hi"


# ============= Flow =============


class TestCheckoutFlow:
    def test_send_opens_link_then_clears(self, cart, settings):
        opened, routes = [], []
        flow = CheckoutFlow(cart, settings, opener=opened.append, navigate=routes.append)

        assert flow.enter() is True
        link = flow.send_order()

        assert opened == [link]
        assert link.startswith("https://wa.me/1234567890?text=")
        assert cart.is_empty
        assert CartEngine(cart.store).is_empty
        assert routes == ["/"]

    def test_empty_cart_redirects_on_entry(self, settings):
        routes = []
        flow = CheckoutFlow(CartEngine(InMemoryKeyValueStore()), settings, opener=print, navigate=routes.append)

        assert flow.enter() is False
        assert flow.redirected
        assert routes == ["/"]

    def test_send_on_empty_cart_opens_nothing(self, settings):
        opened = []
        flow = CheckoutFlow(CartEngine(InMemoryKeyValueStore()), settings, opener=opened.append)
        assert flow.send_order() is None
        assert opened == []

    def test_opener_failure_keeps_cart(self, cart, settings):
        def failing_opener(link):
            raise OSError("no browser")

        flow = CheckoutFlow(cart, settings, opener=failing_opener)
        with pytest.raises(OSError):
            flow.send_order()

        assert len(cart) == 2
        assert not flow.redirected

    def test_entry_reads_persisted_cart(self, cart, settings):
        other_tab = CartEngine(cart.store)
        other_tab.clear()

        flow = CheckoutFlow(cart, settings, opener=print)
        assert flow.enter() is False
