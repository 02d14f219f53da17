"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter

from catalogue.api.schemas import ProductResponse
from catalogue.product.listing import get_product, list_products

product_router = APIRouter(prefix="/api/products", tags=["products"])


@product_router.get("", response_model=list[ProductResponse])
async def products() -> list[ProductResponse]:
    return [ProductResponse.from_product(product) for product in list_products()]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def product(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(get_product(product_id))
