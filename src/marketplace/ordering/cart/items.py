"""Cart item management: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.catalogue.product.lookup import load_product
from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.cart.management import cart_for


@marketplace.command(part_of="Cart")
class AddToCart:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@marketplace.command(part_of="Cart")
class SetCartItemQuantity:
    """Overwrite a line's quantity. Zero or less removes the line."""

    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    buyer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class ClearCart:
    buyer_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = load_product(command.product_id)
        cart = cart_for(command.buyer_id)
        cart.add_item(
            product_id=str(product.id),
            quantity=command.quantity,
            unit_price=product.price,
            available_stock=product.stock or 0,
        )
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(SetCartItemQuantity)
    def set_item_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.require_for_buyer(command.buyer_id)

        # A product deleted after it was carted has nothing left to sell
        product = current_domain.repository_for(Product).find_by_id(command.product_id)
        available = (product.stock or 0) if product is not None else 0

        cart.set_item_quantity(
            product_id=command.product_id,
            quantity=command.quantity,
            available_stock=available,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.require_for_buyer(command.buyer_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.require_for_buyer(command.buyer_id)
        cart.clear()
        repo.add(cart)
