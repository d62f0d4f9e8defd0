"""Supplier endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import AdminPrincipal, DatabaseSession
from healx.schemas.common import Envelope, Page
from healx.schemas.suppliers import (
    SupplierCategory,
    SupplierCreate,
    SupplierFilters,
    SupplierResponse,
    SupplierStatus,
    SupplierUpdate,
)
from healx.services.supplier_service import SupplierService

router = APIRouter()


@router.get(
    "",
    response_model=Envelope[Page[SupplierResponse]],
    status_code=status.HTTP_200_OK,
    summary="List suppliers",
)
async def list_suppliers(
    principal: AdminPrincipal,
    db: DatabaseSession,
    search: str | None = Query(None),
    category: SupplierCategory | None = Query(None),
    status_filter: SupplierStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[SupplierResponse]]:
    """List suppliers matching name, email or phone."""
    filters = SupplierFilters(
        search=search,
        category=category,
        status=status_filter,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await SupplierService(db).list_suppliers(filters))


@router.post(
    "",
    response_model=Envelope[SupplierResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create supplier",
)
async def create_supplier(
    data: SupplierCreate,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[SupplierResponse]:
    """
    Create a supplier.

    Raises:
        ConflictException: If the email is already registered to a supplier
    """
    supplier = await SupplierService(db).create_supplier(data)
    return Envelope(message="Supplier created", data=supplier)


@router.get(
    "/{supplier_id}",
    response_model=Envelope[SupplierResponse],
    status_code=status.HTTP_200_OK,
    summary="Get supplier",
)
async def get_supplier(
    supplier_id: UUID,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[SupplierResponse]:
    return Envelope(data=await SupplierService(db).get_supplier(supplier_id))


@router.put(
    "/{supplier_id}",
    response_model=Envelope[SupplierResponse],
    status_code=status.HTTP_200_OK,
    summary="Update supplier",
)
async def update_supplier(
    supplier_id: UUID,
    data: SupplierUpdate,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[SupplierResponse]:
    supplier = await SupplierService(db).update_supplier(supplier_id, data)
    return Envelope(message="Supplier updated", data=supplier)


@router.delete(
    "/{supplier_id}",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Delete supplier",
)
async def delete_supplier(
    supplier_id: UUID,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[None]:
    await SupplierService(db).delete_supplier(supplier_id)
    return Envelope(message="Supplier deleted")
