"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from marketplace.api.schemas import Envelope

# --- Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Wireless Mouse",
                    "description": "Ergonomic wireless mouse with long battery life",
                    "price": 29.99,
                    "stock": 50,
                    "images": ["https://example.com/mouse1.jpg"],
                    "category": "Electronics",
                }
            ]
        }
    }

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    images: list[str] = Field(default_factory=list)
    category: str | None = Field(None, max_length=100)
    vendor_id: str | None = None  # honoured for admins only


class UpdateProductRequest(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    images: list[str] | None = None
    category: str | None = Field(None, max_length=100)


# --- Response Schemas ---


class ProductResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    price: float
    stock: int
    images: list[str]
    category: str | None = None
    vendor_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=str(product.id),
            title=product.title,
            description=product.description,
            price=product.price,
            stock=product.stock or 0,
            images=product.image_urls,
            category=product.category,
            vendor_id=str(product.vendor_id),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductEnvelope(Envelope):
    product: ProductResponse


class ProductListResponse(Envelope):
    count: int
    total: int
    page: int
    pages: int
    products: list[ProductResponse]
