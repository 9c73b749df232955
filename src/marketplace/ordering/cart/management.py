"""Cart management: command and handler.

Carts are opened lazily: the first read or add creates an empty one.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ordering.cart.cart import Cart


@marketplace.command(part_of="Cart")
class OpenCart:
    """Return the buyer's cart, creating an empty one if needed."""

    buyer_id = Identifier(required=True)


def cart_for(buyer_id) -> Cart:
    """The buyer's cart, or a new unsaved empty one."""
    cart = current_domain.repository_for(Cart).for_buyer(buyer_id)
    return cart if cart is not None else Cart.create(buyer_id=buyer_id)


@marketplace.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_buyer(command.buyer_id)
        if cart is None:
            cart = Cart.create(buyer_id=command.buyer_id)
            repo.add(cart)
        return str(cart.id)
