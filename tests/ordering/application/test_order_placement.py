"""Application tests for checkout: cart to pending order plus payment intent."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.catalogue.product.details import UpdateProduct
from marketplace.catalogue.product.product import Product
from marketplace.exceptions import PaymentGatewayError
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.cart.items import AddToCart
from marketplace.ordering.order.creation import PlaceOrder
from marketplace.ordering.order.order import Order, PaymentStatus


def _add(buyer_id, product_id, quantity):
    command = AddToCart(buyer_id=buyer_id, product_id=product_id, quantity=quantity)
    current_domain.process(command, asynchronous=False)


def _place(buyer_id):
    return current_domain.process(PlaceOrder(buyer_id=buyer_id), asynchronous=False)


def _orders():
    return current_domain.repository_for(Order).newest_first()


class TestPlaceOrder:
    def test_creates_pending_order_and_clears_cart(self, buyer_id, vendor_id, make_product, gateway):
        product_id = make_product(vendor_id, price=10.0, stock=10)
        _add(buyer_id, product_id, 5)

        checkout = _place(buyer_id)

        order = current_domain.repository_for(Order).get(checkout.order_id)
        assert order.total_amount == 50.0
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.payment_intent_id == checkout.payment_intent_id
        assert checkout.payment_intent_id.startswith("mock_pi_")
        assert checkout.client_secret.startswith("mock_client_secret_")
        assert current_domain.repository_for(Cart).for_buyer(buyer_id).items == []

    def test_stock_is_not_touched_at_checkout(self, buyer_id, vendor_id, make_product):
        product_id = make_product(vendor_id, stock=10)
        _add(buyer_id, product_id, 5)

        _place(buyer_id)

        assert current_domain.repository_for(Product).get(product_id).stock == 10

    def test_intent_is_requested_for_total_and_order(self, buyer_id, vendor_id, make_product, gateway):
        _add(buyer_id, make_product(vendor_id, price=2.5, stock=10), 4)

        checkout = _place(buyer_id)

        call = next(c for c in gateway.calls if c["method"] == "create_intent")
        assert call["amount"] == 10.0
        assert call["currency"] == "usd"
        assert call["metadata"]["order_id"] == checkout.order_id

    def test_lines_snapshot_vendor_and_title(self, buyer_id, vendor_id, make_product):
        _add(buyer_id, make_product(vendor_id, title="Desk Lamp"), 1)

        checkout = _place(buyer_id)

        order = current_domain.repository_for(Order).get(checkout.order_id)
        assert order.items[0].vendor_id == vendor_id
        assert order.items[0].title == "Desk Lamp"

    def test_total_uses_cart_snapshot_not_current_price(self, buyer_id, vendor_id, make_product):
        product_id = make_product(vendor_id, price=10.0)
        _add(buyer_id, product_id, 2)
        command = UpdateProduct(product_id=product_id, actor_id=vendor_id, actor_role="vendor", price=25.0)
        current_domain.process(command, asynchronous=False)

        checkout = _place(buyer_id)

        assert current_domain.repository_for(Order).get(checkout.order_id).total_amount == 20.0

    def test_empty_cart_writes_nothing(self, buyer_id, gateway):
        with pytest.raises(ValidationError) as exc:
            _place(buyer_id)

        assert exc.value.messages == {"cart": ["Cart is empty"]}
        assert _orders() == []
        assert gateway.calls == []

    def test_stock_shortfall_at_checkout(self, buyer_id, vendor_id, make_product, gateway):
        product_id = make_product(vendor_id, title="Laptop", stock=5)
        _add(buyer_id, product_id, 5)
        command = UpdateProduct(product_id=product_id, actor_id=vendor_id, actor_role="vendor", stock=2)
        current_domain.process(command, asynchronous=False)

        with pytest.raises(ValidationError) as exc:
            _place(buyer_id)

        assert exc.value.messages == {"stock": ["Insufficient stock for Laptop"]}
        assert _orders() == []
        assert gateway.calls == []
        assert current_domain.repository_for(Cart).for_buyer(buyer_id).line_for(product_id).quantity == 5

    def test_gateway_failure_leaves_no_order_and_cart_intact(self, buyer_id, vendor_id, make_product, gateway):
        product_id = make_product(vendor_id, stock=10)
        _add(buyer_id, product_id, 3)
        gateway.configure(should_succeed=False, failure_reason="Gateway down")

        with pytest.raises(PaymentGatewayError) as exc:
            _place(buyer_id)

        assert exc.value.message == "Gateway down"
        assert _orders() == []
        assert current_domain.repository_for(Cart).for_buyer(buyer_id).line_for(product_id).quantity == 3

    def test_currency_from_environment(self, buyer_id, vendor_id, make_product, monkeypatch):
        monkeypatch.setenv("PAYMENT_CURRENCY", "EUR")
        _add(buyer_id, make_product(vendor_id), 1)

        checkout = _place(buyer_id)

        assert current_domain.repository_for(Order).get(checkout.order_id).currency == "eur"
