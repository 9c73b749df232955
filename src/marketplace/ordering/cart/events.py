"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer

from marketplace.domain import marketplace


@marketplace.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or its line quantity was increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart line was overwritten."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.event(part_of="Cart")
class CartCleared:
    """Every line was removed, by the buyer or because an order was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
