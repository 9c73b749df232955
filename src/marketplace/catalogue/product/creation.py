"""Product creation: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.identity.access import Permission, is_allowed
from marketplace.identity.user.lookup import load_user
from marketplace.identity.user.user import Role


@marketplace.command(part_of="Product")
class CreateProduct:
    """List a new product.

    The product belongs to the caller, unless an admin names another vendor
    in ``vendor_id``.
    """

    actor_id: Identifier(required=True)
    actor_role: String(choices=Role, required=True)
    vendor_id: Identifier()
    title: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    stock: Integer(min_value=0, default=0)
    images: Text()  # JSON array of image URLs
    category: String(max_length=100)


@marketplace.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        vendor_id = command.actor_id
        if command.vendor_id and is_allowed(Role(command.actor_role), Permission.ASSIGN_VENDOR):
            vendor = load_user(command.vendor_id)
            if vendor.role not in (Role.VENDOR.value, Role.ADMIN.value):
                raise ValidationError({"vendor_id": ["Products can only be assigned to a vendor or an admin"]})
            vendor_id = str(vendor.id)

        product = Product.create(
            title=command.title,
            description=command.description,
            price=command.price,
            stock=command.stock or 0,
            images=command.images,
            category=command.category,
            vendor_id=vendor_id,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
