"""Product Routes — provider catalog management and public listings."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from storefront.api.dependencies import get_actor, get_product_catalog
from storefront.api.results import unwrap
from storefront.core.domain_types import Actor, ProductSort
from storefront.schemas.product import (
    ProductCreate, ProductListResponse, ProductResponse, ProductUpdate,
    RestockRequest,
)
from storefront.services.products import ProductCatalog

router = APIRouter(prefix="/api/v1", tags=["products"])


@router.post(
    "/products", response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate,
    actor: Actor = Depends(get_actor),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    result = unwrap(
        await catalog.create_product(
            actor, body.name, body.price, body.stock, body.description,
        ),
        actor,
    )
    return ProductResponse.model_validate(result["product"])


@router.get("/products", response_model=ProductListResponse)
async def search_products(
    query: str = Query(..., min_length=1, max_length=200),
    page: int = Query(1, ge=1),
    sort: ProductSort = Query(ProductSort.CREATED_AT_DESC),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    result = unwrap(await catalog.search_products(query, page, sort))
    return ProductListResponse.model_validate(result, from_attributes=True)


@router.get(
    "/providers/{provider_id}/products", response_model=ProductListResponse,
)
async def list_provider_products(
    provider_id: UUID,
    page: int = Query(1, ge=1),
    sort: ProductSort = Query(ProductSort.CREATED_AT_DESC),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    result = unwrap(
        await catalog.list_products_for_provider(provider_id, page, sort),
        None, provider_id,
    )
    return ProductListResponse.model_validate(result, from_attributes=True)


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: UUID,
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    result = unwrap(await catalog.get_product(product_id), None, product_id)
    return ProductResponse.model_validate(result["product"])


@router.patch("/products/{product_id}", response_model=ProductResponse)
async def edit_product(
    product_id: UUID,
    body: ProductUpdate,
    actor: Actor = Depends(get_actor),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    result = unwrap(
        await catalog.edit_product(
            actor, product_id, body.name, body.price, body.description,
        ),
        actor, product_id,
    )
    return ProductResponse.model_validate(result["product"])


@router.delete(
    "/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_product(
    product_id: UUID,
    actor: Actor = Depends(get_actor),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    unwrap(await catalog.delete_product(actor, product_id), actor, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/products/{product_id}/restock", response_model=ProductResponse)
async def restock_product(
    product_id: UUID,
    body: RestockRequest,
    actor: Actor = Depends(get_actor),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    result = unwrap(
        await catalog.restock(actor, product_id, body.quantity), actor, product_id,
    )
    return ProductResponse.model_validate(result["product"])
