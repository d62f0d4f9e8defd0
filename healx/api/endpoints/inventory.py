"""Surgical inventory, disposal and restock endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, status

from healx.dependencies import DatabaseSession, StaffPrincipal
from healx.schemas.common import Envelope, Page
from healx.schemas.inventory import (
    DisposalFilters,
    DisposalRecordResponse,
    DisposalResult,
    DisposalStats,
    DisposeRequest,
    ItemCategory,
    RestockFilters,
    RestockNeed,
    RestockOrderCreate,
    RestockOrderResponse,
    RestockStatus,
    RestockStatusUpdate,
    RestockUrgency,
    StockStatus,
    StockUpdate,
    SurgicalItemCreate,
    SurgicalItemFilters,
    SurgicalItemResponse,
    SurgicalItemUpdate,
)
from healx.services.inventory_service import InventoryService
from healx.services.restock_service import RestockService

router = APIRouter()


# Surgical items


@router.get(
    "/surgical-items",
    response_model=Envelope[Page[SurgicalItemResponse]],
    status_code=status.HTTP_200_OK,
    summary="List surgical items",
)
async def list_surgical_items(
    principal: StaffPrincipal,
    db: DatabaseSession,
    search: str | None = Query(None),
    category: ItemCategory | None = Query(None),
    stock_status: StockStatus | None = Query(None),
    sort_by: str = Query("name", pattern=r"^(name|quantity|price|created_at|expiry_date)$"),
    sort_order: str = Query("asc", pattern=r"^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[SurgicalItemResponse]]:
    """
    List active surgical items.

    Args:
        search: Matches name, description, supplier or batch number
        category: Exact category
        stock_status: Available, Low Stock or Out of Stock
        sort_by: Sort column
        sort_order: asc or desc
        page: Page number
        page_size: Items per page

    Returns:
        One page of items with their derived stock status
    """
    filters = SurgicalItemFilters(
        search=search,
        category=category,
        stock_status=stock_status,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await InventoryService(db).list_items(filters))


@router.post(
    "/surgical-items",
    response_model=Envelope[SurgicalItemResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create surgical item",
)
async def create_surgical_item(
    data: SurgicalItemCreate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[SurgicalItemResponse]:
    item = await InventoryService(db).create_item(data)
    return Envelope(message="Surgical item created", data=item)


@router.get(
    "/surgical-items/{item_id}",
    response_model=Envelope[SurgicalItemResponse],
    status_code=status.HTTP_200_OK,
    summary="Get surgical item",
)
async def get_surgical_item(
    item_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[SurgicalItemResponse]:
    return Envelope(data=await InventoryService(db).get_item(item_id))


@router.put(
    "/surgical-items/{item_id}",
    response_model=Envelope[SurgicalItemResponse],
    status_code=status.HTTP_200_OK,
    summary="Update surgical item",
)
async def update_surgical_item(
    item_id: UUID,
    data: SurgicalItemUpdate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[SurgicalItemResponse]:
    """Update descriptive fields. Quantity changes go through update-stock or dispose."""
    item = await InventoryService(db).update_item(item_id, data)
    return Envelope(message="Surgical item updated", data=item)


@router.delete(
    "/surgical-items/{item_id}",
    response_model=Envelope[None],
    status_code=status.HTTP_200_OK,
    summary="Delete surgical item",
)
async def delete_surgical_item(
    item_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[None]:
    """Soft delete an item."""
    await InventoryService(db).delete_item(item_id)
    return Envelope(message="Surgical item deleted")


@router.post(
    "/surgical-items/{item_id}/dispose",
    response_model=Envelope[DisposalResult],
    status_code=status.HTTP_200_OK,
    summary="Dispose stock",
)
async def dispose_surgical_item(
    item_id: UUID,
    data: DisposeRequest,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[DisposalResult]:
    """
    Dispose units of an item and record the disposal.

    Raises:
        NotFoundException: If the item does not exist
        InsufficientStockException: If more units are disposed than in stock
    """
    result = await InventoryService(db).dispose_item(item_id, data)
    return Envelope(
        message=f"Disposed {data.quantity_disposed} units of {result.item.name}",
        data=result,
    )


@router.post(
    "/surgical-items/{item_id}/update-stock",
    response_model=Envelope[SurgicalItemResponse],
    status_code=status.HTTP_200_OK,
    summary="Record usage or restock",
)
async def update_stock(
    item_id: UUID,
    data: StockUpdate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[SurgicalItemResponse]:
    """
    Apply a stock change.

    ``usage`` removes units and fails rather than going below zero;
    ``restock`` adds units and stamps the restock time.
    """
    item = await InventoryService(db).update_stock(item_id, data)
    return Envelope(message="Stock updated", data=item)


@router.get(
    "/surgical-items/{item_id}/restock-need",
    response_model=Envelope[RestockNeed],
    status_code=status.HTTP_200_OK,
    summary="Evaluate restock need",
)
async def get_restock_need(
    item_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[RestockNeed]:
    return Envelope(data=await InventoryService(db).restock_need(item_id))


# Disposal history


@router.get(
    "/disposal-history",
    response_model=Envelope[Page[DisposalRecordResponse]],
    status_code=status.HTTP_200_OK,
    summary="Disposal history",
)
async def disposal_history(
    principal: StaffPrincipal,
    db: DatabaseSession,
    item_id: UUID | None = Query(None),
    reason: str | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[DisposalRecordResponse]]:
    filters = DisposalFilters(
        item_id=item_id,
        reason=reason,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await InventoryService(db).disposal_history(filters))


@router.get(
    "/disposal-stats",
    response_model=Envelope[DisposalStats],
    status_code=status.HTTP_200_OK,
    summary="Disposal statistics",
)
async def disposal_stats(principal: StaffPrincipal, db: DatabaseSession) -> Envelope[DisposalStats]:
    """Totals of disposal records, quantity and value, grouped by reason."""
    return Envelope(data=await InventoryService(db).disposal_stats())


# Restock orders


@router.get(
    "/restock-orders",
    response_model=Envelope[Page[RestockOrderResponse]],
    status_code=status.HTTP_200_OK,
    summary="List restock orders",
)
async def list_restock_orders(
    principal: StaffPrincipal,
    db: DatabaseSession,
    status_filter: RestockStatus | None = Query(None, alias="status"),
    urgency: RestockUrgency | None = Query(None),
    item_id: UUID | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> Envelope[Page[RestockOrderResponse]]:
    filters = RestockFilters(
        status=status_filter,
        urgency=urgency,
        item_id=item_id,
        page=page,
        page_size=page_size,
    )
    return Envelope(data=await RestockService(db).list_orders(filters))


@router.post(
    "/restock-orders",
    response_model=Envelope[RestockOrderResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create restock order",
)
async def create_restock_order(
    data: RestockOrderCreate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[RestockOrderResponse]:
    """
    Create a PENDING restock order.

    The reorder quantity defaults to topping stock up to three times the
    minimum level; the estimated cost is computed from the item price.
    """
    order = await RestockService(db).create_order(data)
    return Envelope(message="Restock order created", data=order)


@router.post(
    "/restock-orders/auto-check",
    response_model=Envelope[list[RestockOrderResponse]],
    status_code=status.HTTP_200_OK,
    summary="Run automatic restock check",
)
async def auto_restock_check(
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[list[RestockOrderResponse]]:
    """Create orders for every low item without an open order."""
    orders = await RestockService(db).auto_check()
    return Envelope(message=f"Created {len(orders)} restock orders", data=orders)


@router.get(
    "/restock-orders/{order_id}",
    response_model=Envelope[RestockOrderResponse],
    status_code=status.HTTP_200_OK,
    summary="Get restock order",
)
async def get_restock_order(
    order_id: UUID,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[RestockOrderResponse]:
    return Envelope(data=await RestockService(db).get_order(order_id))


@router.patch(
    "/restock-orders/{order_id}/status",
    response_model=Envelope[RestockOrderResponse],
    status_code=status.HTTP_200_OK,
    summary="Change restock order status",
)
async def update_restock_order_status(
    order_id: UUID,
    data: RestockStatusUpdate,
    principal: StaffPrincipal,
    db: DatabaseSession,
) -> Envelope[RestockOrderResponse]:
    """
    Move a restock order through its lifecycle.

    Delivery adds the reorder quantity to the item's stock.

    Raises:
        InvalidStatusTransitionException: If the move is not allowed
    """
    order = await RestockService(db).transition(order_id, data)
    return Envelope(message=f"Restock order {order.status.value.lower()}", data=order)
