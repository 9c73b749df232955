from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.exceptions import NotFound


def load_product(product_id) -> Product:
    """Fetch a product by id, raising ``NotFound`` when it does not exist."""
    product = current_domain.repository_for(Product).find_by_id(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product
