"""Order retrieval with per-role visibility.

Admins see every order, buyers see their own, and vendors see any order with
at least one line for a product they sold. Vendor visibility is a full scan
filtered in memory.
"""

from protean.utils.globals import current_domain

from marketplace.exceptions import NotFound
from marketplace.identity.access import Actor, Ownership, Permission, ensure_allowed
from marketplace.identity.user.user import Role
from marketplace.ordering.order.order import Order


def _owners(order: Order, role: Role) -> set[str]:
    if role == Role.VENDOR:
        return order.vendor_ids
    return {str(order.buyer_id)}


def list_orders(actor: Actor) -> list[Order]:
    """Orders visible to ``actor``, newest first."""
    ensure_allowed(actor, Permission.VIEW_ORDER)
    repo = current_domain.repository_for(Order)

    if actor.role == Role.BUYER:
        return repo.newest_first(buyer_id=actor.user_id)

    orders = repo.newest_first()
    if actor.role == Role.VENDOR:
        return [o for o in orders if o.involves_vendor(actor.user_id)]
    return orders


def get_order(actor: Actor, order_id) -> Order:
    order = current_domain.repository_for(Order).find_by_id(order_id)
    if order is None:
        raise NotFound("Order not found")

    ensure_allowed(
        actor,
        Permission.VIEW_ORDER,
        Ownership.of(actor.user_id, _owners(order, actor.role)),
        message="Not authorized to view this order",
    )
    return order
