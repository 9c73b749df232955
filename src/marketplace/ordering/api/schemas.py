"""Pydantic request/response schemas for the Ordering API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from marketplace.api.schemas import Envelope

# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------


class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"product_id": "prod-001", "quantity": 2}],
        }
    }

    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    product_id: str
    quantity: int  # zero or less removes the line


# ---------------------------------------------------------------------------
# Cart Response Schemas
# ---------------------------------------------------------------------------


class CartProductSummary(BaseModel):
    id: str
    title: str
    price: float
    stock: int
    images: list[str]


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    price_snapshot: float
    subtotal: float
    product: CartProductSummary | None = None  # None once the product is deleted


class CartResponse(BaseModel):
    id: str
    buyer_id: str
    items: list[CartLineResponse]
    total: float
    updated_at: datetime | None = None

    @classmethod
    def from_cart(cls, cart, products: dict | None = None) -> CartResponse:
        products = products or {}
        lines = []
        for item in cart.items:
            product = products.get(str(item.product_id))
            lines.append(
                CartLineResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    quantity=item.quantity,
                    price_snapshot=item.price_snapshot,
                    subtotal=item.subtotal,
                    product=(
                        CartProductSummary(
                            id=str(product.id),
                            title=product.title,
                            price=product.price,
                            stock=product.stock or 0,
                            images=product.image_urls,
                        )
                        if product is not None
                        else None
                    ),
                )
            )
        return cls(
            id=str(cart.id),
            buyer_id=str(cart.buyer_id),
            items=lines,
            total=cart.total,
            updated_at=cart.updated_at,
        )


class CartEnvelope(Envelope):
    cart: CartResponse


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    vendor_id: str | None = None
    title: str | None = None
    quantity: int
    price_snapshot: float
    stock_settled: bool


class OrderResponse(BaseModel):
    id: str
    buyer_id: str
    items: list[OrderItemResponse]
    total_amount: float
    currency: str
    payment_status: str
    payment_intent_id: str | None = None
    failure_reason: str | None = None
    paid_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            id=str(order.id),
            buyer_id=str(order.buyer_id),
            items=[
                OrderItemResponse(
                    id=str(i.id),
                    product_id=str(i.product_id),
                    vendor_id=str(i.vendor_id) if i.vendor_id else None,
                    title=i.title,
                    quantity=i.quantity,
                    price_snapshot=i.price_snapshot,
                    stock_settled=bool(i.stock_settled),
                )
                for i in order.items
            ],
            total_amount=order.total_amount,
            currency=order.currency,
            payment_status=order.payment_status,
            payment_intent_id=order.payment_intent_id,
            failure_reason=order.failure_reason,
            paid_at=order.paid_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class PaymentHandle(BaseModel):
    client_secret: str
    payment_intent_id: str


class CheckoutResponse(Envelope):
    order: OrderResponse
    payment: PaymentHandle


class OrderEnvelope(Envelope):
    order: OrderResponse


class OrderListResponse(Envelope):
    count: int
    orders: list[OrderResponse]
