"""Purchase order schemas."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from healx.schemas.common import Money


class PurchaseOrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    ORDERED = "ordered"
    RECEIVED = "received"
    CANCELLED = "cancelled"


PURCHASE_ORDER_TRANSITIONS: dict[PurchaseOrderStatus, frozenset[PurchaseOrderStatus]] = {
    PurchaseOrderStatus.PENDING: frozenset(
        {PurchaseOrderStatus.APPROVED, PurchaseOrderStatus.CANCELLED}
    ),
    PurchaseOrderStatus.APPROVED: frozenset(
        {PurchaseOrderStatus.ORDERED, PurchaseOrderStatus.CANCELLED}
    ),
    PurchaseOrderStatus.ORDERED: frozenset(
        {PurchaseOrderStatus.RECEIVED, PurchaseOrderStatus.CANCELLED}
    ),
    PurchaseOrderStatus.RECEIVED: frozenset(),
    PurchaseOrderStatus.CANCELLED: frozenset(),
}


class PurchaseOrderItemIn(BaseModel):
    """Line item as sent by a client. Any ``total_price`` sent is ignored."""

    product: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., ge=1)
    unit_price: Money = Field(..., gt=0)

    model_config = {"extra": "ignore"}


class PurchaseOrderItemResponse(BaseModel):
    product: str
    quantity: int
    unit_price: Money
    total_price: Money

    model_config = {"from_attributes": True}


def _not_in_past(value: date | None) -> date | None:
    if value is not None and value < date.today():
        raise ValueError("Expected delivery date cannot be in the past")
    return value


DeliveryDate = Annotated[date | None, AfterValidator(_not_in_past)]


class PurchaseOrderCreate(BaseModel):
    """Schema for creating a purchase order."""

    supplier_id: UUID
    items: list[PurchaseOrderItemIn] = Field(..., min_length=1)
    expected_delivery: DeliveryDate = None
    notes: str | None = Field(None, max_length=500)
    rating: int = Field(3, ge=1, le=5)

    model_config = {"extra": "ignore"}


class PurchaseOrderUpdate(BaseModel):
    """
    Update a purchase order.

    Replacing ``items`` recomputes the total; ``status`` follows the order
    lifecycle.
    """

    items: list[PurchaseOrderItemIn] | None = Field(None, min_length=1)
    status: PurchaseOrderStatus | None = None
    expected_delivery: DeliveryDate = None
    notes: str | None = Field(None, max_length=500)
    rating: int | None = Field(None, ge=1, le=5)

    model_config = {"extra": "ignore"}


class SupplierSummary(BaseModel):
    id: UUID
    name: str
    email: str
    phone: str


class PurchaseOrderResponse(BaseModel):
    """Schema for purchase order response."""

    id: UUID
    order_number: str
    supplier_id: UUID
    supplier: SupplierSummary | None = None
    items: list[PurchaseOrderItemResponse]
    total_amount: Money
    status: PurchaseOrderStatus
    order_date: datetime
    expected_delivery: date | None = None
    actual_delivery: datetime | None = None
    notes: str | None = None
    rating: int
    created_at: datetime
    updated_at: datetime


class PurchaseOrderFilters(BaseModel):
    status: PurchaseOrderStatus | None = None
    supplier_id: UUID | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
