"""Product catalogue endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from healx.dependencies import DatabaseSession
from healx.schemas.common import Envelope
from healx.schemas.products import ProductCreate, ProductResponse, ProductUpdate
from healx.services.product_service import ProductService

router = APIRouter()


@router.get("", response_model=Envelope[list[ProductResponse]], summary="List products")
async def list_products(db: DatabaseSession) -> Envelope[list[ProductResponse]]:
    return Envelope(data=await ProductService(db).list_products())


@router.post(
    "",
    response_model=Envelope[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
)
async def create_product(data: ProductCreate, db: DatabaseSession) -> Envelope[ProductResponse]:
    return Envelope(data=await ProductService(db).create_product(data))


@router.put("/{product_id}", response_model=Envelope[ProductResponse], summary="Update product")
async def update_product(
    product_id: UUID,
    data: ProductUpdate,
    db: DatabaseSession,
) -> Envelope[ProductResponse]:
    return Envelope(data=await ProductService(db).update_product(product_id, data))


@router.delete("/{product_id}", response_model=Envelope[None], summary="Delete product")
async def delete_product(product_id: UUID, db: DatabaseSession) -> Envelope[None]:
    await ProductService(db).delete_product(product_id)
    return Envelope(message="Product deleted")
