"""Shopping Cart aggregate: one per buyer, converted into an Order at checkout.

Stock checks compare against the product's live stock at call time and take
no reservation. Two buyers can both hold the last unit in their carts; the
loser only finds out at checkout or when settlement cannot decrement. This
gap is accepted for carts.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer

from marketplace.domain import marketplace
from marketplace.exceptions import InsufficientStock, NotFound
from marketplace.ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price_snapshot = Float(required=True, min_value=0.0)
    added_at = DateTime()

    @property
    def subtotal(self):
        return round(self.price_snapshot * self.quantity, 2)


@marketplace.aggregate
class Cart:
    buyer_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(i.product_id) for i in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, buyer_id):
        now = datetime.now(UTC)
        return cls(buyer_id=buyer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def add_item(self, product_id, quantity, unit_price, available_stock):
        """Add a product at its current price, or bump the quantity of its line.

        The cumulative quantity must fit in ``available_stock``; on failure the
        cart is left as it was.
        """
        existing = self.line_for(product_id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        if quantity > available_stock or new_quantity > available_stock:
            raise InsufficientStock(product_id=str(product_id), requested=new_quantity, available=available_stock)

        now = datetime.now(UTC)

        if existing:
            existing.quantity = new_quantity
        else:
            self.add_items(
                CartItem(
                    product_id=product_id,
                    quantity=quantity,
                    price_snapshot=unit_price,
                    added_at=now,
                )
            )

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=new_quantity,
            )
        )

    def set_item_quantity(self, product_id, quantity, available_stock):
        """Overwrite a line's quantity, keeping its price snapshot.

        A quantity of zero or less removes the line.
        """
        item = self.line_for(product_id)
        if item is None:
            raise NotFound("Item not found in cart")

        if quantity > available_stock:
            raise InsufficientStock(product_id=str(product_id), requested=quantity, available=available_stock)

        if quantity <= 0:
            self.remove_item(product_id)
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        """Drop the line for a product. Absent lines are ignored."""
        item = self.line_for(product_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )

    def clear(self):
        lines = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=lines))

    @property
    def total(self):
        return round(sum(i.price_snapshot * i.quantity for i in self.items), 2)
