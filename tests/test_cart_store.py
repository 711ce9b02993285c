"""Tests for CartStore and cart persistence."""

import json
import logging
from decimal import Decimal

import pytest
from sqlalchemy import create_engine

from pharmacart import cart as C


class TestCartStore:
    """CartStore dispatches, persists and notifies."""

    def test_operations_return_new_state(self, store, make_item):
        """Every operation returns the state it produced."""
        state = store.add_item(make_item("a", "10", 2))

        assert state is store.state
        assert store.state.total == Decimal("20")

    def test_every_change_is_persisted(self, store, storage, make_item):
        """Storage mirrors the store after each operation."""
        store.add_item(make_item("a", "10", 2))
        store.update_quantity("a", 3)

        doc = json.loads(storage.get("cart"))
        assert doc["items"][0]["quantity"] == 3
        assert Decimal(doc["total"]) == Decimal("30")

    def test_subscribers_notified(self, store, make_item):
        """Listeners receive each new state until they unsubscribe."""
        seen = []
        unsubscribe = store.subscribe(seen.append)

        store.add_item(make_item("a"))
        unsubscribe()
        store.clear_cart()

        assert len(seen) == 1
        assert seen[0].items[0].id == "a"

    def test_save_failure_propagates(self, make_item):
        """A storage error reaches the caller."""

        class Broken(C.MemoryStorage):
            fail = False

            def set(self, key, value):
                if self.fail:
                    raise OSError("disk full")
                super().set(key, value)

        storage = Broken()
        store = C.CartStore(C.KeyValuePersistence(storage))
        storage.fail = True

        with pytest.raises(OSError):
            store.add_item(make_item("a"))


class TestRehydrate:
    """Construction loads and normalizes the persisted cart."""

    def test_round_trip(self, storage, make_item):
        """A reloaded store equals the one that saved."""
        first = C.CartStore(C.KeyValuePersistence(storage))
        first.add_item(make_item("a", "12.34", 2, rx=True))
        first.add_item(make_item("b", "0.99", 1))

        second = C.CartStore(C.KeyValuePersistence(storage))

        assert second.state == first.state

    def test_duplicate_ids_merged(self):
        """Duplicate ids in storage collapse into one line."""
        raw = json.dumps(
            {
                "items": [
                    {"id": "a", "name": "A", "price": 10, "quantity": 2},
                    {"id": "a", "name": "A", "price": 10, "quantity": 3},
                ],
                "total": 0,
            }
        )
        storage = C.MemoryStorage({"cart": raw})

        store = C.CartStore(C.KeyValuePersistence(storage))

        assert len(store.state.items) == 1
        assert store.state.items[0].quantity == 5
        assert store.state.total == Decimal("50")
        assert len(json.loads(storage.get("cart"))["items"]) == 1

    def test_numeric_ids_accepted(self):
        """Integer ids from older payloads are read as strings."""
        raw = json.dumps({"items": [{"id": 5, "name": "A", "price": "1.50", "quantity": 2}]})

        store = C.CartStore(C.KeyValuePersistence(C.MemoryStorage({"cart": raw})))

        assert store.state.items[0].id == "5"
        assert store.state.total == Decimal("3.00")

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            json.dumps({"items": "nope"}),
            json.dumps({"items": [{"id": "a", "name": "A", "price": 1, "quantity": 0}]}),
            json.dumps({"items": [{"id": "a", "name": "A", "price": -1, "quantity": 1}]}),
        ],
    )
    def test_malformed_loads_empty(self, raw, caplog):
        """Malformed documents load as an empty cart with a warning."""
        with caplog.at_level(logging.WARNING, logger="pharmacart.cart._persist"):
            store = C.CartStore(C.KeyValuePersistence(C.MemoryStorage({"cart": raw})))

        assert store.state == C.EMPTY_CART
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_absent_loads_empty(self, store):
        """No stored value gives an empty cart."""
        assert store.state == C.EMPTY_CART


class TestJsonFileStorage:
    """File-backed storage keeps all keys in one JSON object."""

    def test_round_trip_through_file(self, tmp_path, make_item):
        """State survives a new store over the same file."""
        path = tmp_path / "nested" / "storage.json"
        C.CartStore(C.KeyValuePersistence(C.JsonFileStorage(path))).add_item(
            make_item("a", "3.25", 4)
        )

        reloaded = C.CartStore(C.KeyValuePersistence(C.JsonFileStorage(path)))

        assert reloaded.state.total == Decimal("13.00")
        assert "cart" in json.loads(path.read_text())

    def test_other_keys_preserved(self, tmp_path):
        """Writing one key keeps the others."""
        storage = C.JsonFileStorage(tmp_path / "s.json")
        storage.set("token", "abc")
        storage.set("cart", "{}")

        assert storage.get("token") == "abc"
        assert storage.get("cart") == "{}"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        """An unreadable file behaves like no file."""
        path = tmp_path / "s.json"
        path.write_text("{{{")

        assert C.JsonFileStorage(path).get("cart") is None

    def test_undecodable_bytes_read_as_empty(self, tmp_path):
        """A file that is not UTF-8 loads an empty cart instead of raising."""
        path = tmp_path / "s.json"
        path.write_bytes(b"\xff\xfe{not json")

        assert C.JsonFileStorage(path).get("cart") is None
        store = C.CartStore(C.KeyValuePersistence(C.JsonFileStorage(path)))
        assert store.state == C.EMPTY_CART


class TestSQLAlchemyStorage:
    """SQL-backed storage over a temp-file SQLite database."""

    def test_round_trip(self, tmp_path, make_item):
        """Cart persists through the storage table."""
        engine = create_engine(f"sqlite:///{tmp_path / 'cart.db'}")
        store = C.CartStore(C.KeyValuePersistence(C.SQLAlchemyStorage(engine)))
        store.add_item(make_item("a", "7.00", 3))
        store.add_item(make_item("a", "7.00", 1))

        reloaded = C.CartStore(C.KeyValuePersistence(C.SQLAlchemyStorage(engine)))

        assert reloaded.state.items[0].quantity == 4
        assert reloaded.state.total == Decimal("28.00")
        engine.dispose()

    def test_overwrite_same_key(self, tmp_path):
        """Setting a key twice keeps the latest value."""
        engine = create_engine(f"sqlite:///{tmp_path / 'kv.db'}")
        storage = C.SQLAlchemyStorage(engine)

        storage.set("cart", "one")
        storage.set("cart", "two")

        assert storage.get("cart") == "two"
        assert storage.get("missing") is None
        engine.dispose()
