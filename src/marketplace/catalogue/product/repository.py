"""Repository for the Product aggregate."""

from protean.utils.query import Q

from marketplace.catalogue.product.product import Product
from marketplace.domain import marketplace


@marketplace.repository(part_of=Product)
class ProductRepository:
    def find_by_id(self, product_id) -> Product | None:
        """Find a product by id, or None if it was deleted or never existed."""
        products = self._dao.query.filter(id=str(product_id)).all().items
        return products[0] if products else None

    def newest_first(self) -> list[Product]:
        return self._dao.query.order_by("-created_at").limit(None).all().items

    def search(self, category: str | None = None, text: str | None = None, offset: int = 0, limit: int | None = None):
        """Newest-first ``ResultSet`` narrowed by exact category and a
        case-insensitive substring match on title or description.

        ``items`` holds the requested window and ``total`` counts every match.
        """
        query = self._dao.query
        if category:
            query = query.filter(category=category)
        if text:
            in_description = Q(description__isnull=False) & Q(description__icontains=text)
            query = query.filter(Q(title__icontains=text) | in_description)
        return query.order_by("-created_at").offset(offset).limit(limit).all()

    def delete_product(self, product: Product) -> None:
        self._dao.delete(product)
