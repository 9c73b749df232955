"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductCreated:
    """A vendor listed a new product."""

    __version__ = 1

    product_id: Identifier(required=True)
    vendor_id: Identifier(required=True)
    title: String(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    category: String()
    created_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductUpdated:
    """The product's listing details, price or stock level were edited."""

    __version__ = 1

    product_id: Identifier(required=True)
    title: String(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    category: String()


@marketplace.event(part_of="Product")
class StockDecremented:
    """Units were taken out of stock when an order's payment settled."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_id: Identifier()
    quantity: Integer(required=True)
    remaining: Integer(required=True)
