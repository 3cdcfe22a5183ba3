"""
Tests for the cart key-value stores and the store factory.
"""
from unittest.mock import MagicMock

import pytest
import redis

from storefront.client.cart import CartEngine
from storefront.core.config import CartStoreBackend, get_settings
from storefront.services.cart_store import (
    CartStoreError,
    FileKeyValueStore,
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    get_cart_store,
    reset_cart_store,
)
from storefront.services.cart_store import file as file_store


# ============= In-memory =============


class TestInMemoryStore:
    def test_set_get_remove(self):
        store = InMemoryKeyValueStore()
        assert store.get("cart") is None

        store.set("cart", b"[]")
        assert store.get("cart") == b"[]"

        store.remove("cart")
        store.remove("cart")
        assert store.get("cart") is None

    def test_health_check(self):
        assert InMemoryKeyValueStore().health_check() is True


# ============= File =============


class TestFileStore:
    def test_roundtrip_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "cart.json"
        FileKeyValueStore(str(path)).set("cart", "é ✓".encode("utf-8"))

        assert FileKeyValueStore(str(path)).get("cart").decode("utf-8") == "é ✓"

    def test_keys_are_independent(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path / "cart.json"))
        store.set("a", b"1")
        store.set("b", b"2")
        store.remove("a")

        assert store.get("a") is None
        assert store.get("b") == b"2"

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_text("{not json", encoding="utf-8")

        store = FileKeyValueStore(str(path))
        assert store.get("cart") is None

        store.set("cart", b"[]")
        assert store.get("cart") == b"[]"

    def test_non_utf8_file_reads_empty(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_bytes(b"\xff\xfe{garbage")

        assert FileKeyValueStore(str(path)).get("cart") is None
        assert CartEngine(FileKeyValueStore(str(path))).is_empty

    def test_non_latin1_value_reads_empty(self, tmp_path):
        path = tmp_path / "cart.json"
        path.write_text('{"cart": "\u2713"}', encoding="utf-8")

        assert CartEngine(FileKeyValueStore(str(path))).is_empty

    def test_failed_write_leaves_no_temp_file(self, tmp_path, monkeypatch):
        path = tmp_path / "cart.json"
        store = FileKeyValueStore(str(path))

        def refuse(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(file_store.os, "replace", refuse)
        with pytest.raises(CartStoreError):
            store.set("cart", b"[]")

        assert not (tmp_path / "cart.json.tmp").exists()
        assert not path.exists()

    def test_unwritable_location_raises_store_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")

        store = FileKeyValueStore(str(blocker / "cart.json"))
        with pytest.raises(CartStoreError):
            store.set("cart", b"[]")

    def test_cart_survives_restart(self, tmp_path, make_item):
        path = str(tmp_path / "cart.json")
        CartEngine(FileKeyValueStore(path)).add_or_update(make_item(), 2, "Extra basil")

        restored = CartEngine(FileKeyValueStore(path))
        assert restored.total_items == 2
        assert restored[0].note == "Extra basil"


# ============= Redis =============


class TestRedisStore:
    def test_keys_are_prefixed(self):
        client = MagicMock()
        client.get.return_value = b"[]"
        store = RedisKeyValueStore(key_prefix="kiosk1:", client=client)

        store.set("cart", b"[]")
        assert store.get("cart") == b"[]"
        store.remove("cart")

        client.set.assert_called_once_with("kiosk1:cart", b"[]")
        client.get.assert_called_once_with("kiosk1:cart")
        client.delete.assert_called_once_with("kiosk1:cart")

    def test_redis_errors_are_wrapped(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        client.ping.side_effect = redis.ConnectionError("down")
        store = RedisKeyValueStore(client=client)

        with pytest.raises(CartStoreError):
            store.get("cart")
        assert store.health_check() is False


# ============= Factory =============


class TestFactory:
    def test_backend_from_settings(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CART_STORE_BACKEND", "file")
        monkeypatch.setenv("CART_STORE_PATH", str(tmp_path / "cart.json"))
        get_settings.cache_clear()
        reset_cart_store()
        try:
            assert get_settings().cart_store_backend == CartStoreBackend.FILE
            store = get_cart_store()
            assert store.provider_name == "file"
            assert get_cart_store() is store
        finally:
            monkeypatch.undo()
            get_settings.cache_clear()
            reset_cart_store()

    def test_default_is_memory(self):
        reset_cart_store()
        assert get_cart_store().provider_name == "memory"
        reset_cart_store()
