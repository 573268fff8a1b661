"""Product endpoints (the catalog records orders are placed against)."""
from fastapi import APIRouter, Depends, status

from api.dependencies import get_caller, get_catalog_service
from core.application.dtos import CreateProductRequest, ProductDTO
from core.application.services import CatalogService
from core.domain.value_objects import CallerContext


router = APIRouter()


@router.post(
    "",
    response_model=ProductDTO,
    status_code=status.HTTP_201_CREATED,
    summary="List a product",
)
async def create_product(
    request: CreateProductRequest,
    caller: CallerContext = Depends(get_caller),
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_product(caller, request)


@router.get("/{product_id}", response_model=ProductDTO, summary="Get product by ID")
async def get_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.get_product(product_id)
