"""Order aggregate: a buyer's cart frozen at checkout, awaiting payment.

Lines carry the price snapshot taken when the product was carted, so the total
is fixed at placement and never re-read from the catalogue. After placement
only the payment fields and the per-line ``stock_settled`` flag change.

State Machine:
    PENDING → PAID
    PENDING → FAILED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.exceptions import InvalidState
from marketplace.ordering.order.events import OrderPaid, OrderPaymentFailed, OrderPlaced


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


def line_total(lines) -> float:
    """Σ price snapshot × quantity, rounded to cents."""
    return round(sum(line["price_snapshot"] * line["quantity"] for line in lines), 2)


@marketplace.entity(part_of="Order")
class OrderItem:
    """A product and quantity bought at a fixed unit price.

    ``vendor_id`` and ``title`` are snapshots so vendors keep seeing their
    sales after a product is edited or deleted. ``stock_settled`` records
    whether the sale was taken out of stock when payment settled.
    """

    product_id = Identifier(required=True)
    vendor_id = Identifier()
    title = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    price_snapshot = Float(required=True, min_value=0.0)
    stock_settled = Boolean(default=False)


@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default="usd")
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_intent_id = String(max_length=255)
    failure_reason = String(max_length=500)
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_matches_line_snapshots(self):
        if not self.items:
            return
        expected = round(sum(i.price_snapshot * i.quantity for i in self.items), 2)
        if abs(expected - self.total_amount) > 0.005:
            raise ValidationError({"total_amount": ["Order total must equal the sum of its lines"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, buyer_id, lines, currency="usd"):
        """Create a pending order.

        Args:
            buyer_id: The buyer placing the order.
            lines: List of dicts with product_id, vendor_id, title, quantity
                   and price_snapshot.
            currency: ISO currency code, lower-case.
        """
        if not lines:
            raise InvalidState("Cart is empty", field="items")

        now = datetime.now(UTC)
        order = cls(
            buyer_id=buyer_id,
            items=[
                OrderItem(
                    product_id=line["product_id"],
                    vendor_id=line.get("vendor_id"),
                    title=line.get("title"),
                    quantity=line["quantity"],
                    price_snapshot=line["price_snapshot"],
                )
                for line in lines
            ],
            total_amount=line_total(lines),
            currency=currency,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        return order

    # -------------------------------------------------------------------
    # Payment lifecycle
    # -------------------------------------------------------------------
    @property
    def is_pending(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING.value

    def ensure_pending(self):
        if not self.is_pending:
            raise InvalidState("Order already processed", field="payment_status")

    def attach_payment_intent(self, intent_id):
        """Record the gateway's intent id. Raises OrderPlaced once it is known."""
        self.ensure_pending()
        if self.payment_intent_id:
            raise InvalidState("Order already has a payment intent", field="payment_intent_id")

        self.payment_intent_id = intent_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                total_amount=self.total_amount,
                currency=self.currency,
                payment_intent_id=intent_id,
                line_count=len(self.items),
                placed_at=self.created_at,
            )
        )

    def mark_paid(self, settled_item_ids=()):
        """Flip to paid, flagging the lines whose stock was taken out."""
        self.ensure_pending()

        settled = {str(i) for i in settled_item_ids}
        now = datetime.now(UTC)

        for item in self.items:
            if str(item.id) in settled:
                item.stock_settled = True
        self.payment_status = PaymentStatus.PAID.value
        self.paid_at = now
        self.updated_at = now

        unsettled = [str(i.product_id) for i in self.items if not i.stock_settled]
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_intent_id=self.payment_intent_id,
                total_amount=self.total_amount,
                paid_at=now,
                unsettled_product_ids=json.dumps(unsettled),
            )
        )

    def mark_failed(self, reason=None):
        self.ensure_pending()

        self.payment_status = PaymentStatus.FAILED.value
        self.failure_reason = reason
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderPaymentFailed(
                order_id=str(self.id),
                payment_intent_id=self.payment_intent_id,
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------
    @property
    def vendor_ids(self) -> set[str]:
        return {str(i.vendor_id) for i in self.items if i.vendor_id}

    def involves_vendor(self, vendor_id) -> bool:
        return str(vendor_id) in self.vendor_ids

    @property
    def unsettled_items(self):
        if self.payment_status != PaymentStatus.PAID.value:
            return []
        return [i for i in self.items if not i.stock_settled]
