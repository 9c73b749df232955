"""FastAPI routes for the product catalogue."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.api.dependencies import requires
from marketplace.api.schemas import Envelope
from marketplace.catalogue.api.schemas import (
    CreateProductRequest,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    UpdateProductRequest,
)
from marketplace.catalogue.product.creation import CreateProduct
from marketplace.catalogue.product.details import DeleteProduct, UpdateProduct
from marketplace.catalogue.product.lookup import load_product
from marketplace.catalogue.product.queries import DEFAULT_PAGE_SIZE, list_products
from marketplace.identity.access import Actor, Permission

product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductListResponse)
async def get_products(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    category: str | None = None,
    search: str | None = None,
) -> ProductListResponse:
    result = list_products(page=page, limit=limit, category=category, search=search)
    return ProductListResponse(
        count=result.count,
        total=result.total,
        page=result.page,
        pages=result.pages,
        products=[ProductResponse.from_product(p) for p in result.items],
    )


@product_router.get("/{product_id}", response_model=ProductEnvelope)
async def get_product(product_id: str) -> ProductEnvelope:
    return ProductEnvelope(product=ProductResponse.from_product(load_product(product_id)))


@product_router.post("", status_code=201, response_model=ProductEnvelope)
async def create_product(
    body: CreateProductRequest,
    actor: Actor = Depends(requires(Permission.CREATE_PRODUCT)),
) -> ProductEnvelope:
    command = CreateProduct(
        actor_id=actor.user_id,
        actor_role=actor.role.value,
        vendor_id=body.vendor_id,
        title=body.title,
        description=body.description,
        price=body.price,
        stock=body.stock,
        images=json.dumps(body.images),
        category=body.category,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductEnvelope(
        message="Product created successfully",
        product=ProductResponse.from_product(load_product(product_id)),
    )


@product_router.put("/{product_id}", response_model=ProductEnvelope)
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    actor: Actor = Depends(requires(Permission.MODIFY_PRODUCT)),
) -> ProductEnvelope:
    command = UpdateProduct(
        product_id=product_id,
        actor_id=actor.user_id,
        actor_role=actor.role.value,
        title=body.title,
        description=body.description,
        price=body.price,
        stock=body.stock,
        images=json.dumps(body.images) if body.images is not None else None,
        category=body.category,
    )
    current_domain.process(command, asynchronous=False)
    return ProductEnvelope(
        message="Product updated successfully",
        product=ProductResponse.from_product(load_product(product_id)),
    )


@product_router.delete("/{product_id}", response_model=Envelope)
async def delete_product(
    product_id: str,
    actor: Actor = Depends(requires(Permission.MODIFY_PRODUCT)),
) -> Envelope:
    command = DeleteProduct(product_id=product_id, actor_id=actor.user_id, actor_role=actor.role.value)
    current_domain.process(command, asynchronous=False)
    return Envelope(message="Product deleted successfully")
