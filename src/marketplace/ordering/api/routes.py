"""FastAPI routes for the Ordering domain: the buyer's cart and orders."""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain

from marketplace.api.dependencies import current_actor, requires
from marketplace.catalogue.product.product import Product
from marketplace.identity.access import Actor, Permission
from marketplace.ordering.api.schemas import (
    AddToCartRequest,
    CartEnvelope,
    CartResponse,
    CheckoutResponse,
    OrderEnvelope,
    OrderListResponse,
    OrderResponse,
    PaymentHandle,
    UpdateCartItemRequest,
)
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, SetCartItemQuantity
from marketplace.ordering.cart.management import OpenCart
from marketplace.ordering.order.creation import PlaceOrder
from marketplace.ordering.order.queries import get_order, list_orders


def _cart_envelope(buyer_id: str, message: str | None = None) -> CartEnvelope:
    cart = current_domain.repository_for(Cart).require_for_buyer(buyer_id)
    products = current_domain.repository_for(Product)
    live = {}
    for item in cart.items:
        product = products.find_by_id(item.product_id)
        if product is not None:
            live[str(item.product_id)] = product
    return CartEnvelope(message=message, cart=CartResponse.from_cart(cart, live))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartEnvelope)
async def get_cart(actor: Actor = Depends(requires(Permission.MANAGE_CART))) -> CartEnvelope:
    current_domain.process(OpenCart(buyer_id=actor.user_id), asynchronous=False)
    return _cart_envelope(actor.user_id)


@cart_router.post("", response_model=CartEnvelope)
async def add_to_cart(
    body: AddToCartRequest,
    actor: Actor = Depends(requires(Permission.MANAGE_CART)),
) -> CartEnvelope:
    command = AddToCart(buyer_id=actor.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_envelope(actor.user_id, "Item added to cart")


@cart_router.put("", response_model=CartEnvelope)
async def update_cart_item(
    body: UpdateCartItemRequest,
    actor: Actor = Depends(requires(Permission.MANAGE_CART)),
) -> CartEnvelope:
    command = SetCartItemQuantity(buyer_id=actor.user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return _cart_envelope(actor.user_id, "Cart updated")


@cart_router.delete("/{product_id}", response_model=CartEnvelope)
async def remove_from_cart(
    product_id: str,
    actor: Actor = Depends(requires(Permission.MANAGE_CART)),
) -> CartEnvelope:
    current_domain.process(RemoveFromCart(buyer_id=actor.user_id, product_id=product_id), asynchronous=False)
    return _cart_envelope(actor.user_id, "Item removed from cart")


@cart_router.delete("", response_model=CartEnvelope)
async def clear_cart(actor: Actor = Depends(requires(Permission.MANAGE_CART))) -> CartEnvelope:
    current_domain.process(ClearCart(buyer_id=actor.user_id), asynchronous=False)
    return _cart_envelope(actor.user_id, "Cart cleared")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=CheckoutResponse)
async def place_order(actor: Actor = Depends(requires(Permission.PLACE_ORDER))) -> CheckoutResponse:
    command = PlaceOrder(buyer_id=actor.user_id)
    # The gateway call blocks; keep it off the event loop.
    checkout = await run_in_threadpool(current_domain.process, command, asynchronous=False)
    order = get_order(actor, checkout.order_id)
    return CheckoutResponse(
        message="Order created successfully",
        order=OrderResponse.from_order(order),
        payment=PaymentHandle(
            client_secret=checkout.client_secret,
            payment_intent_id=checkout.payment_intent_id,
        ),
    )


@order_router.get("", response_model=OrderListResponse)
async def get_orders(actor: Actor = Depends(current_actor)) -> OrderListResponse:
    orders = [OrderResponse.from_order(o) for o in list_orders(actor)]
    return OrderListResponse(count=len(orders), orders=orders)


@order_router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order_by_id(order_id: str, actor: Actor = Depends(current_actor)) -> OrderEnvelope:
    return OrderEnvelope(order=OrderResponse.from_order(get_order(actor, order_id)))
