"""Payment settlement: commands and handler.

Two paths settle an order:
- SettlePayment: a verified gateway callback, resolved by payment intent id.
- ConfirmPayment: the order's own buyer confirming directly (mock payments).

Both flip the order's payment status and take the sold quantities out of
stock in the same unit of work. Settlement only ever applies to pending
orders; a repeated callback finds the order already paid and does nothing,
so stock is never decremented twice.

A product that was deleted, or whose stock dropped below the line quantity,
cannot be decremented. The line is left with ``stock_settled = False`` and
reported in the OrderPaid event rather than failing the payment.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.exceptions import NotFound
from marketplace.identity.access import Actor, Ownership, Permission, ensure_allowed
from marketplace.identity.user.user import Role
from marketplace.ordering.order.order import Order
from marketplace.payments.gateway.port import SettlementOutcome
from marketplace.utils.logging import get_logger, order_context

logger = get_logger(__name__)


@marketplace.command(part_of="Order")
class SettlePayment:
    payment_intent_id = String(required=True, max_length=255)
    outcome = String(choices=SettlementOutcome, required=True)
    failure_reason = String(max_length=500)


@marketplace.command(part_of="Order")
class ConfirmPayment:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(choices=Role, required=True)


def settle_paid(order: Order) -> list[str]:
    """Decrement stock for each line and mark the order paid.

    Returns the product ids whose stock could not be decremented.
    """
    order.ensure_pending()

    products = current_domain.repository_for(Product)
    settled_item_ids = []
    unsettled = []

    for item in order.items:
        product = products.find_by_id(item.product_id)
        if product is None or not product.has_stock_for(item.quantity):
            unsettled.append(str(item.product_id))
            logger.warning(
                "stock_not_settled",
                product_id=str(item.product_id),
                quantity=item.quantity,
                available=product.stock if product is not None else None,
            )
            continue

        product.decrement_stock(item.quantity, order_id=str(order.id))
        products.add(product)
        settled_item_ids.append(str(item.id))

    order.mark_paid(settled_item_ids)
    current_domain.repository_for(Order).add(order)
    return unsettled


@marketplace.command_handler(part_of=Order)
class SettlementHandler:
    @handle(SettlePayment)
    def settle_payment(self, command):
        order = current_domain.repository_for(Order).find_by_payment_intent(command.payment_intent_id)
        if order is None:
            logger.warning("settlement_for_unknown_intent", payment_intent_id=command.payment_intent_id)
            return None

        with order_context(order.id, order.buyer_id, command.payment_intent_id):
            if not order.is_pending:
                logger.info("settlement_ignored_order_not_pending", payment_status=order.payment_status)
                return str(order.id)

            if command.outcome == SettlementOutcome.FAILED.value:
                order.mark_failed(command.failure_reason)
                current_domain.repository_for(Order).add(order)
                logger.info("payment_failed", reason=command.failure_reason)
                return str(order.id)

            unsettled = settle_paid(order)
            logger.info("payment_settled", unsettled_products=unsettled)
        return str(order.id)

    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        order = current_domain.repository_for(Order).find_by_id(command.order_id)
        if order is None:
            raise NotFound("Order not found")

        actor = Actor(user_id=str(command.actor_id), role=Role(command.actor_role))
        ensure_allowed(
            actor,
            Permission.CONFIRM_PAYMENT,
            Ownership.of(actor.user_id, order.buyer_id),
            message="Not authorized",
        )

        with order_context(order.id, order.buyer_id, order.payment_intent_id):
            unsettled = settle_paid(order)
            logger.info("payment_confirmed", unsettled_products=unsettled)
        return str(order.id)
