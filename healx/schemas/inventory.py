"""Surgical inventory, disposal and restock schemas."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, computed_field

from healx.schemas.common import Money, NonBlankStr


class ItemCategory(str, Enum):
    """Surgical item categories."""

    CUTTING = "Cutting Instruments"
    GRASPING = "Grasping Instruments"
    HEMOSTATIC = "Hemostatic Instruments"
    RETRACTORS = "Retractors"
    SUTURES = "Sutures"
    DISPOSABLES = "Disposables"
    IMPLANTS = "Implants"
    MONITORING = "Monitoring Equipment"
    ANESTHESIA = "Anesthesia Equipment"
    STERILIZATION = "Sterilization Equipment"
    OTHER = "Other"


class StockStatus(str, Enum):
    """Derived stock status of an item."""

    AVAILABLE = "Available"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


def classify_stock(quantity: int, min_stock_level: int) -> StockStatus:
    """Classify a quantity against the item's minimum level."""
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= min_stock_level:
        return StockStatus.LOW_STOCK
    return StockStatus.AVAILABLE


class StockChangeType(str, Enum):
    USAGE = "usage"
    RESTOCK = "restock"


class RestockStatus(str, Enum):
    """Restock order status enumeration."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    ORDERED = "ORDERED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    ERROR = "ERROR"


OPEN_RESTOCK_STATUSES = (RestockStatus.PENDING, RestockStatus.APPROVED, RestockStatus.ORDERED)

RESTOCK_TRANSITIONS: dict[RestockStatus, frozenset[RestockStatus]] = {
    RestockStatus.PENDING: frozenset(
        {RestockStatus.APPROVED, RestockStatus.CANCELLED, RestockStatus.ERROR}
    ),
    RestockStatus.APPROVED: frozenset(
        {RestockStatus.ORDERED, RestockStatus.CANCELLED, RestockStatus.ERROR}
    ),
    RestockStatus.ORDERED: frozenset(
        {RestockStatus.DELIVERED, RestockStatus.CANCELLED, RestockStatus.ERROR}
    ),
    RestockStatus.DELIVERED: frozenset(),
    RestockStatus.CANCELLED: frozenset(),
    RestockStatus.ERROR: frozenset(),
}


class RestockUrgency(str, Enum):
    """Urgency tiers, most urgent first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# Surgical items


class Location(BaseModel):
    room: str | None = Field(None, max_length=50)
    shelf: str | None = Field(None, max_length=50)
    bin: str | None = Field(None, max_length=50)


class SurgicalItemBase(BaseModel):
    """Base surgical item schema."""

    name: str = Field(..., min_length=1, max_length=100)
    category: ItemCategory
    description: str | None = Field(None, max_length=500)
    quantity: int = Field(..., ge=0)
    min_stock_level: int = Field(10, ge=0)
    price: Money = Field(..., ge=0, decimal_places=2)
    supplier_id: UUID | None = None
    supplier_name: str = Field(..., min_length=1, max_length=200)
    supplier_contact: str | None = Field(None, max_length=50)
    supplier_email: EmailStr | None = None
    location: Location | None = None
    expiry_date: date | None = None
    batch_number: str | None = Field(None, max_length=100)
    serial_number: str | None = Field(None, max_length=100)


class SurgicalItemCreate(SurgicalItemBase):
    """Schema for creating a surgical item."""


class SurgicalItemUpdate(BaseModel):
    """Partial update. Quantity changes go through stock updates and disposal."""

    name: str | None = Field(None, min_length=1, max_length=100)
    category: ItemCategory | None = None
    description: str | None = Field(None, max_length=500)
    min_stock_level: int | None = Field(None, ge=0)
    price: Money | None = Field(None, ge=0, decimal_places=2)
    supplier_id: UUID | None = None
    supplier_name: str | None = Field(None, min_length=1, max_length=200)
    supplier_contact: str | None = Field(None, max_length=50)
    supplier_email: EmailStr | None = None
    location: Location | None = None
    expiry_date: date | None = None
    batch_number: str | None = Field(None, max_length=100)
    serial_number: str | None = Field(None, max_length=100)


class SurgicalItemResponse(SurgicalItemBase):
    """Surgical item as returned by the API."""

    id: UUID
    supplier_email: str | None = None
    last_restocked: datetime | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def stock_status(self) -> StockStatus:
        return classify_stock(self.quantity, self.min_stock_level)

    @classmethod
    def from_row(cls, row: dict) -> "SurgicalItemResponse":
        """Fold the flat location columns back into a nested object."""
        data = dict(row)
        data["location"] = {
            "room": data.pop("location_room", None),
            "shelf": data.pop("location_shelf", None),
            "bin": data.pop("location_bin", None),
        }
        return cls.model_validate(data)


class SurgicalItemFilters(BaseModel):
    """List query for surgical items."""

    search: str | None = None
    category: ItemCategory | None = None
    stock_status: StockStatus | None = None
    sort_by: str = Field("name", pattern=r"^(name|quantity|price|created_at|expiry_date)$")
    sort_order: str = Field("asc", pattern=r"^(asc|desc)$")
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


# Quantity changes


class DisposeRequest(BaseModel):
    """Dispose part of an item's stock."""

    quantity_disposed: int = Field(..., ge=1)
    reason: NonBlankStr = Field(..., max_length=500)
    disposed_by: NonBlankStr = Field(..., max_length=200)


class StockUpdate(BaseModel):
    """Usage decrements, restock increments."""

    quantity: int = Field(..., ge=1)
    type: StockChangeType


class DisposalRecordResponse(BaseModel):
    """Disposal record response schema."""

    id: UUID
    item_id: UUID
    item_name: str
    category: str | None = None
    quantity_disposed: int
    reason: str
    disposed_by: str
    disposed_date: datetime
    estimated_value: Money
    disposal_type: str
    previous_quantity: int
    remaining_quantity: int
    unit_price: Money

    model_config = {"from_attributes": True}


class DisposalResult(BaseModel):
    """Outcome of a disposal: the updated item and the new record."""

    item: SurgicalItemResponse
    disposal_record: DisposalRecordResponse


class DisposalFilters(BaseModel):
    item_id: UUID | None = None
    reason: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class DisposalReasonStats(BaseModel):
    reason: str
    count: int
    quantity: int
    value: Money


class DisposalStats(BaseModel):
    """Aggregate disposal figures."""

    total_records: int
    total_quantity: int
    total_value: Money
    by_reason: list[DisposalReasonStats]


# Restock


class RestockNeed(BaseModel):
    """Result of evaluating an item against its minimum stock level."""

    item_id: UUID | None = None
    item_name: str | None = None
    current_stock: int
    min_stock_level: int
    needed: bool
    urgency: RestockUrgency
    suggested_quantity: int


class RestockOrderCreate(BaseModel):
    """Manual restock order request."""

    item_id: UUID
    reorder_quantity: int | None = Field(None, ge=1)
    supplier_id: UUID | None = None
    expected_delivery: date | None = None
    notes: str | None = Field(None, max_length=1000)


class RestockStatusUpdate(BaseModel):
    status: RestockStatus
    approved_by: str | None = Field(None, max_length=200)
    actual_cost: Money | None = Field(None, ge=0)
    error_message: str | None = Field(None, max_length=1000)
    notes: str | None = Field(None, max_length=1000)


class RestockOrderResponse(BaseModel):
    """Restock order response schema."""

    id: UUID
    item_id: UUID
    item_name: str
    current_stock: int
    min_stock_level: int
    reorder_quantity: int
    supplier_id: UUID | None = None
    supplier_name: str
    supplier_contact: str | None = None
    supplier_email: str | None = None
    status: RestockStatus
    urgency: RestockUrgency
    estimated_cost: Money | None = None
    actual_cost: Money | None = None
    expected_delivery: date | None = None
    actual_delivery: datetime | None = None
    approved_by: str | None = None
    notes: str | None = None
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RestockFilters(BaseModel):
    status: RestockStatus | None = None
    urgency: RestockUrgency | None = None
    item_id: UUID | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
