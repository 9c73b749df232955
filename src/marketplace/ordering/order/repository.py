"""Repository for the Order aggregate."""

from marketplace.domain import marketplace
from marketplace.ordering.order.order import Order


@marketplace.repository(part_of=Order)
class OrderRepository:
    def find_by_id(self, order_id) -> Order | None:
        orders = self._dao.query.filter(id=str(order_id)).all().items
        return orders[0] if orders else None

    def find_by_payment_intent(self, payment_intent_id) -> Order | None:
        if not payment_intent_id:
            return None
        orders = self._dao.query.filter(payment_intent_id=str(payment_intent_id)).all().items
        return orders[0] if orders else None

    def newest_first(self, buyer_id=None, limit=None) -> list[Order]:
        query = self._dao.query
        if buyer_id is not None:
            query = query.filter(buyer_id=str(buyer_id))
        return query.order_by("-created_at").limit(limit).all().items
