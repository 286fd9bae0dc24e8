"""Customer & Product Routes — read-only listings straight from their procedures."""

from fastapi import APIRouter, Depends

from orderdesk.api.dependencies import get_catalog_service, require_api_key
from orderdesk.services.catalog_service import CatalogService

customer_router = APIRouter(
    prefix="/api/customer", tags=["customers"],
    dependencies=[Depends(require_api_key)],
)
product_router = APIRouter(
    prefix="/api/product", tags=["products"],
    dependencies=[Depends(require_api_key)],
)


@customer_router.get("/viewall")
async def view_all_customers(
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.list_customers()


@product_router.get("/viewall")
async def view_all_products(
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.list_products()
