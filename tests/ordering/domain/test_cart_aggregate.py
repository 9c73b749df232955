"""Tests for the Cart aggregate."""

import pytest

from marketplace.exceptions import InsufficientStock, NotFound
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated


@pytest.fixture()
def cart():
    return Cart.create(buyer_id="buyer-1")


class TestAddItem:
    def test_new_line_snapshots_price(self, cart):
        cart.add_item("prod-1", 3, unit_price=10.0, available_stock=10)

        line = cart.line_for("prod-1")
        assert line.quantity == 3
        assert line.price_snapshot == 10.0
        assert cart.total == 30.0

    def test_same_product_merges_into_one_line(self, cart):
        cart.add_item("prod-1", 3, unit_price=10.0, available_stock=10)
        cart.add_item("prod-1", 2, unit_price=10.0, available_stock=10)

        assert len(cart.items) == 1
        assert cart.line_for("prod-1").quantity == 5

    def test_merge_keeps_original_price_snapshot(self, cart):
        cart.add_item("prod-1", 1, unit_price=10.0, available_stock=10)
        cart.add_item("prod-1", 1, unit_price=12.0, available_stock=10)
        assert cart.line_for("prod-1").price_snapshot == 10.0

    def test_cumulative_quantity_must_fit_stock(self, cart):
        cart.add_item("prod-1", 8, unit_price=10.0, available_stock=10)

        with pytest.raises(InsufficientStock):
            cart.add_item("prod-1", 3, unit_price=10.0, available_stock=10)

        assert cart.line_for("prod-1").quantity == 8

    def test_single_add_over_stock(self, cart):
        with pytest.raises(InsufficientStock) as exc:
            cart.add_item("prod-1", 11, unit_price=10.0, available_stock=10)
        assert exc.value.messages == {"stock": ["Insufficient stock"]}
        assert cart.items == []

    def test_raises_cart_item_added(self, cart):
        cart.add_item("prod-1", 2, unit_price=10.0, available_stock=10)
        cart.add_item("prod-1", 1, unit_price=10.0, available_stock=10)

        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert [(e.quantity, e.line_quantity) for e in events] == [(2, 2), (1, 3)]


class TestSetItemQuantity:
    def test_overwrites_quantity(self, cart):
        cart.add_item("prod-1", 2, unit_price=5.0, available_stock=10)
        cart._events.clear()

        cart.set_item_quantity("prod-1", 7, available_stock=10)

        assert cart.line_for("prod-1").quantity == 7
        event = cart._events[0]
        assert isinstance(event, CartQuantityUpdated)
        assert (event.previous_quantity, event.new_quantity) == (2, 7)

    def test_zero_removes_line(self, cart):
        cart.add_item("prod-1", 2, unit_price=5.0, available_stock=10)
        cart.set_item_quantity("prod-1", 0, available_stock=10)
        assert cart.line_for("prod-1") is None

    def test_negative_removes_line(self, cart):
        cart.add_item("prod-1", 2, unit_price=5.0, available_stock=10)
        cart.set_item_quantity("prod-1", -1, available_stock=10)
        assert cart.items == []

    def test_over_stock_leaves_cart_unchanged(self, cart):
        cart.add_item("prod-1", 2, unit_price=5.0, available_stock=10)

        with pytest.raises(InsufficientStock):
            cart.set_item_quantity("prod-1", 11, available_stock=10)

        assert cart.line_for("prod-1").quantity == 2

    def test_missing_line(self, cart):
        with pytest.raises(NotFound) as exc:
            cart.set_item_quantity("prod-9", 1, available_stock=10)
        assert "Item not found in cart" in str(exc.value)


class TestRemoveAndClear:
    def test_remove_item(self, cart):
        cart.add_item("prod-1", 1, unit_price=5.0, available_stock=10)
        cart.add_item("prod-2", 1, unit_price=7.0, available_stock=10)
        cart._events.clear()

        cart.remove_item("prod-1")

        assert [i.product_id for i in cart.items] == ["prod-2"]
        assert isinstance(cart._events[0], CartItemRemoved)

    def test_remove_absent_item_is_a_no_op(self, cart):
        cart.remove_item("prod-1")
        assert cart._events == []

    def test_clear(self, cart):
        cart.add_item("prod-1", 1, unit_price=5.0, available_stock=10)
        cart.add_item("prod-2", 2, unit_price=7.0, available_stock=10)
        cart._events.clear()

        cart.clear()

        assert cart.items == []
        assert cart.total == 0
        assert cart._events[0].lines_removed == 2
        assert isinstance(cart._events[0], CartCleared)
