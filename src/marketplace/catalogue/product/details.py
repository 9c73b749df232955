"""Product edits and removal: commands and handler.

Vendors may only touch their own products; admins may touch any.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product.lookup import load_product
from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.exceptions import Forbidden
from marketplace.identity.access import Ownership, Permission, is_allowed
from marketplace.identity.user.user import Role
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(choices=Role, required=True)
    title: String(max_length=255)
    description: Text()
    price: Float(min_value=0.0)
    stock: Integer(min_value=0)
    images: Text()  # JSON array of image URLs
    category: String(max_length=100)


@marketplace.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(choices=Role, required=True)


def _ensure_may_modify(command, product, action):
    ownership = Ownership.of(command.actor_id, product.vendor_id)
    if not is_allowed(Role(command.actor_role), Permission.MODIFY_PRODUCT, ownership):
        raise Forbidden(f"Not authorized to {action} this product")


@marketplace.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = load_product(command.product_id)
        _ensure_may_modify(command, product, "update")

        product.update_details(
            title=command.title,
            description=command.description,
            price=command.price,
            stock=command.stock,
            images=command.images,
            category=command.category,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = load_product(command.product_id)
        _ensure_may_modify(command, product, "delete")

        repo.delete_product(product)
        logger.info("product_deleted", product_id=str(product.id), actor_id=str(command.actor_id))
