"""Repository for the Cart aggregate."""

from marketplace.domain import marketplace
from marketplace.exceptions import NotFound
from marketplace.ordering.cart.cart import Cart


@marketplace.repository(part_of=Cart)
class CartRepository:
    def for_buyer(self, buyer_id) -> Cart | None:
        """The buyer's cart, or None if they never opened one."""
        carts = self._dao.query.filter(buyer_id=str(buyer_id)).all().items
        return carts[0] if carts else None

    def require_for_buyer(self, buyer_id) -> Cart:
        cart = self.for_buyer(buyer_id)
        if cart is None:
            raise NotFound("Cart not found")
        return cart
