"""Tests for the Order aggregate and its payment state machine."""

import json

import pytest
from protean.exceptions import ValidationError

from marketplace.ordering.order.events import OrderPaid, OrderPaymentFailed, OrderPlaced
from marketplace.ordering.order.order import Order, PaymentStatus, line_total


def _lines():
    return [
        {"product_id": "p-1", "vendor_id": "v-1", "title": "Widget", "quantity": 5, "price_snapshot": 10.0},
        {"product_id": "p-2", "vendor_id": "v-2", "title": "Gadget", "quantity": 1, "price_snapshot": 0.1},
    ]


@pytest.fixture()
def order():
    return Order.place(buyer_id="buyer-1", lines=_lines())


class TestPlacement:
    def test_total_is_sum_of_snapshots(self, order):
        assert order.total_amount == 50.1
        assert line_total(_lines()) == 50.1

    def test_starts_pending(self, order):
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.is_pending
        assert order.currency == "usd"

    def test_lines_carry_vendor_and_title(self, order):
        assert order.vendor_ids == {"v-1", "v-2"}
        assert order.involves_vendor("v-1")
        assert not order.involves_vendor("v-9")
        assert {i.title for i in order.items} == {"Widget", "Gadget"}

    def test_empty_lines_are_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Order.place(buyer_id="buyer-1", lines=[])
        assert exc.value.messages == {"items": ["Cart is empty"]}

    def test_currency(self):
        order = Order.place(buyer_id="buyer-1", lines=_lines(), currency="eur")
        assert order.currency == "eur"


class TestPaymentIntent:
    def test_attach_raises_order_placed(self, order):
        order.attach_payment_intent("mock_pi_abc")

        assert order.payment_intent_id == "mock_pi_abc"
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.line_count == 2
        assert event.total_amount == 50.1

    def test_intent_attached_only_once(self, order):
        order.attach_payment_intent("mock_pi_abc")
        with pytest.raises(ValidationError):
            order.attach_payment_intent("mock_pi_def")


class TestSettlement:
    def test_mark_paid_flags_settled_lines(self, order):
        order.attach_payment_intent("mock_pi_abc")
        order._events.clear()
        first = order.items[0]

        order.mark_paid([first.id])

        assert order.payment_status == PaymentStatus.PAID.value
        assert order.paid_at is not None
        assert first.stock_settled is True
        assert [i.product_id for i in order.unsettled_items] == [order.items[1].product_id]

        event = order._events[0]
        assert isinstance(event, OrderPaid)
        assert json.loads(event.unsettled_product_ids) == [order.items[1].product_id]

    def test_mark_failed_records_reason(self, order):
        order.mark_failed("Card declined")

        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.failure_reason == "Card declined"
        assert isinstance(order._events[-1], OrderPaymentFailed)

    def test_paid_order_cannot_be_paid_again(self, order):
        order.mark_paid()
        with pytest.raises(ValidationError) as exc:
            order.mark_paid()
        assert exc.value.messages == {"payment_status": ["Order already processed"]}

    def test_failed_order_cannot_be_paid(self, order):
        order.mark_failed("Card declined")
        with pytest.raises(ValidationError):
            order.mark_paid()

    def test_paid_order_cannot_fail(self, order):
        order.mark_paid()
        with pytest.raises(ValidationError):
            order.mark_failed("late decline")

    def test_unsettled_items_only_after_payment(self, order):
        assert order.unsettled_items == []
