"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A buyer checked out their cart and a payment intent was opened."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    total_amount = Float(required=True)
    currency = String(required=True)
    payment_intent_id = String(required=True)
    line_count = Integer(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderPaid:
    """Payment settled. Lines listed as unsettled could not be taken out of stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String()
    total_amount = Float(required=True)
    paid_at = DateTime(required=True)
    unsettled_product_ids = Text()  # JSON array


@marketplace.event(part_of="Order")
class OrderPaymentFailed:
    """The gateway reported that payment for the order failed."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String()
    reason = String(max_length=500)
