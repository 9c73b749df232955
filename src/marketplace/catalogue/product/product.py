"""Product aggregate root.

Stock is a plain non-negative counter. It is only ever lowered through
``decrement_stock``, which refuses to go below zero, so a committed product
always satisfies ``stock >= 0``.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.exceptions import InsufficientStock


def _images_json(images):
    if images is None:
        return json.dumps([])
    if isinstance(images, str):
        return images
    return json.dumps([str(url) for url in images])


@marketplace.aggregate
class Product:
    """A sellable item listed by a vendor (or by an admin on a vendor's behalf)."""

    title: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    stock: Integer(min_value=0, default=0)
    images: Text()  # JSON array of image URLs
    category: String(max_length=100)
    vendor_id: Identifier(required=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def price_cannot_be_negative(self):
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

    @classmethod
    def create(cls, title, price, vendor_id, description=None, stock=0, images=None, category=None):
        from marketplace.catalogue.product.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            title=title,
            description=description,
            price=price,
            stock=stock,
            images=_images_json(images),
            category=category,
            vendor_id=vendor_id,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                vendor_id=vendor_id,
                title=title,
                price=price,
                stock=stock,
                category=category,
                created_at=now,
            )
        )
        return product

    def update_details(self, title=None, description=None, price=None, stock=None, images=None, category=None):
        from marketplace.catalogue.product.events import ProductUpdated

        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if price is not None:
            self.price = price
        if stock is not None:
            self.stock = stock
        if images is not None:
            self.images = _images_json(images)
        if category is not None:
            self.category = category

        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                title=self.title,
                price=self.price,
                stock=self.stock,
                category=self.category,
            )
        )

    def has_stock_for(self, quantity) -> bool:
        return (self.stock or 0) >= quantity

    def decrement_stock(self, quantity, order_id=None):
        """Take ``quantity`` units out of stock, or raise without touching it."""
        from marketplace.catalogue.product.events import StockDecremented

        if not self.has_stock_for(quantity):
            raise InsufficientStock(
                f"Insufficient stock for {self.title}",
                product_id=str(self.id),
                requested=quantity,
                available=self.stock,
            )

        self.stock = self.stock - quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockDecremented(
                product_id=self.id,
                order_id=order_id,
                quantity=quantity,
                remaining=self.stock,
            )
        )

    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []
