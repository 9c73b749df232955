"""Read-side queries over the product catalogue."""

import math
from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product

DEFAULT_PAGE_SIZE = 10


@dataclass
class ProductPage:
    items: list[Product] = field(default_factory=list)
    total: int = 0
    page: int = 1
    pages: int = 0

    @property
    def count(self) -> int:
        return len(self.items)


def list_products(page: int = 1, limit: int = DEFAULT_PAGE_SIZE, category=None, search=None) -> ProductPage:
    """Newest-first page of products, optionally narrowed by category and a
    case-insensitive search over title and description."""
    page = max(int(page or 1), 1)
    limit = max(int(limit or DEFAULT_PAGE_SIZE), 1)
    text = search.strip() if search else None

    result = current_domain.repository_for(Product).search(
        category=category,
        text=text,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return ProductPage(
        items=list(result.items),
        total=result.total,
        page=page,
        pages=math.ceil(result.total / limit),
    )
