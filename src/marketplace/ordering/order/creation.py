"""Order placement: command and handler.

Checkout runs as a single unit of work. The payment intent is requested
before anything is written, so a gateway failure leaves neither an orphaned
pending order nor an emptied cart behind.
"""

import os
from dataclasses import dataclass

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.exceptions import InsufficientStock, InvalidState
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.order.order import Order
from marketplace.payments.gateway import get_gateway
from marketplace.utils.logging import get_logger, order_context

logger = get_logger(__name__)


@dataclass(frozen=True)
class Checkout:
    order_id: str
    payment_intent_id: str
    client_secret: str


@marketplace.command(part_of="Order")
class PlaceOrder:
    """Turn the buyer's cart into a pending order and open a payment intent."""

    buyer_id = Identifier(required=True)


def _order_lines(cart):
    """Re-check live stock for every cart line and snapshot what the order needs."""
    products = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        product = products.find_by_id(item.product_id)
        if product is None or not product.has_stock_for(item.quantity):
            title = product.title if product is not None else "product"
            raise InsufficientStock(
                f"Insufficient stock for {title}",
                product_id=str(item.product_id),
                requested=item.quantity,
                available=product.stock if product is not None else 0,
            )
        lines.append(
            {
                "product_id": str(item.product_id),
                "vendor_id": str(product.vendor_id),
                "title": product.title,
                "quantity": item.quantity,
                "price_snapshot": item.price_snapshot,
            }
        )
    return lines


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_buyer(command.buyer_id)
        if cart is None or not cart.items:
            raise InvalidState("Cart is empty", field="cart")

        currency = os.getenv("PAYMENT_CURRENCY", "usd").lower()
        order = Order.place(
            buyer_id=command.buyer_id,
            lines=_order_lines(cart),
            currency=currency,
        )

        with order_context(order.id, command.buyer_id):
            intent = get_gateway().create_intent(
                amount=order.total_amount,
                currency=currency,
                metadata={"order_id": str(order.id), "buyer_id": str(command.buyer_id)},
            )
            order.attach_payment_intent(intent.intent_id)
            current_domain.repository_for(Order).add(order)

            cart.clear()
            cart_repo.add(cart)

            logger.info(
                "order_placed",
                total_amount=order.total_amount,
                payment_intent_id=intent.intent_id,
            )
        return Checkout(
            order_id=str(order.id),
            payment_intent_id=intent.intent_id,
            client_secret=intent.client_secret,
        )
