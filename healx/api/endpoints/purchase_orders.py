"""Purchase order endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import AdminPrincipal, DatabaseSession
from healx.schemas.common import Envelope, Page
from healx.schemas.purchase_orders import (
    PurchaseOrderCreate,
    PurchaseOrderFilters,
    PurchaseOrderResponse,
    PurchaseOrderStatus,
    PurchaseOrderUpdate,
)
from healx.services.purchase_order_service import PurchaseOrderService

router = APIRouter()


@router.get(
    "",
    response_model=Envelope[Page[PurchaseOrderResponse]],
    status_code=status.HTTP_200_OK,
    summary="List purchase orders",
)
async def list_purchase_orders(
    principal: AdminPrincipal,
    db: DatabaseSession,
    status_filter: PurchaseOrderStatus | None = Query(None, alias="status"),
    supplier_id: UUID | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[PurchaseOrderResponse]]:
    filters = PurchaseOrderFilters(
        status=status_filter,
        supplier_id=supplier_id,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await PurchaseOrderService(db).list_orders(filters))


@router.post(
    "",
    response_model=Envelope[PurchaseOrderResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create purchase order",
)
async def create_purchase_order(
    data: PurchaseOrderCreate,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[PurchaseOrderResponse]:
    """
    Create a purchase order.

    Line totals and the order total are computed on the server; any totals
    in the request body are ignored.

    Raises:
        NotFoundException: If the supplier does not exist
    """
    order = await PurchaseOrderService(db).create_order(data, created_by=principal.id)
    return Envelope(message="Purchase order created", data=order)


@router.get(
    "/{order_id}",
    response_model=Envelope[PurchaseOrderResponse],
    status_code=status.HTTP_200_OK,
    summary="Get purchase order",
)
async def get_purchase_order(
    order_id: UUID,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[PurchaseOrderResponse]:
    return Envelope(data=await PurchaseOrderService(db).get_order(order_id))


@router.put(
    "/{order_id}",
    response_model=Envelope[PurchaseOrderResponse],
    status_code=status.HTTP_200_OK,
    summary="Update purchase order",
)
async def update_purchase_order(
    order_id: UUID,
    data: PurchaseOrderUpdate,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[PurchaseOrderResponse]:
    """Replace line items, change status or edit delivery details."""
    order = await PurchaseOrderService(db).update_order(order_id, data)
    return Envelope(message="Purchase order updated", data=order)


@router.delete(
    "/{order_id}",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Delete purchase order",
)
async def delete_purchase_order(
    order_id: UUID,
    principal: AdminPrincipal,
    db: DatabaseSession,
) -> Envelope[None]:
    await PurchaseOrderService(db).delete_order(order_id)
    return Envelope(message="Purchase order deleted")
