"""Utility expense schemas."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from healx.schemas.common import Money, NonBlankStr

UTILITY_ID_PATTERN = r"^[A-Z0-9]{6}$"


class UtilityCategory(str, Enum):
    ELECTRICITY = "Electricity"
    WATER = "Water & Sewage"
    WASTE = "Waste Management"
    INTERNET = "Internet & Communication"
    GENERATOR_FUEL = "Generator Fuel"
    OTHER = "Other"


class UtilityPaymentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    OVERDUE = "Overdue"


def _upper(value: object) -> object:
    if isinstance(value, str):
        return value.strip().upper()
    return value


def check_billing_period(start: date | None, end: date | None) -> None:
    """Raise ``ValueError`` for a period that starts in the future or ends before it starts."""
    if start is not None and start > date.today():
        raise ValueError("Billing period start date cannot be in the future")
    if start is not None and end is not None and end < start:
        raise ValueError("Billing period end date must be after start date")


class UtilityCreate(BaseModel):
    """Utility bill; an id is generated when none is given."""

    utility_id: str | None = Field(None, pattern=UTILITY_ID_PATTERN)
    category: UtilityCategory
    description: NonBlankStr = Field(..., min_length=5, max_length=500)
    amount: Money = Field(..., ge=0)
    billing_period_start: date
    billing_period_end: date
    payment_status: UtilityPaymentStatus = UtilityPaymentStatus.PENDING
    vendor_name: NonBlankStr = Field(..., min_length=2, max_length=200)
    invoice_number: str | None = Field(None, max_length=100)

    model_config = {"extra": "ignore"}

    @field_validator("utility_id", mode="before")
    @classmethod
    def upper_utility_id(cls, v: object) -> object:
        return _upper(v)

    @model_validator(mode="after")
    def validate_period(self) -> "UtilityCreate":
        check_billing_period(self.billing_period_start, self.billing_period_end)
        return self


class UtilityUpdate(BaseModel):
    """
    Partial update. The id and creation time are fixed; the billing period
    is re-checked against the stored dates.
    """

    category: UtilityCategory | None = None
    description: NonBlankStr | None = Field(None, min_length=5, max_length=500)
    amount: Money | None = Field(None, ge=0)
    billing_period_start: date | None = None
    billing_period_end: date | None = None
    payment_status: UtilityPaymentStatus | None = None
    vendor_name: NonBlankStr | None = Field(None, min_length=2, max_length=200)
    invoice_number: str | None = Field(None, max_length=100)

    model_config = {"extra": "ignore"}


class UtilityResponse(BaseModel):
    id: UUID
    utility_id: str
    category: UtilityCategory
    description: str
    amount: Money
    billing_period_start: date
    billing_period_end: date
    payment_status: UtilityPaymentStatus
    vendor_name: str
    invoice_number: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UtilityFilters(BaseModel):
    search: str | None = None
    category: UtilityCategory | None = None
    payment_status: UtilityPaymentStatus | None = None
    vendor_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class GeneratedUtilityId(BaseModel):
    id: str


class ExpenseBreakdown(BaseModel):
    key: str
    total: Money
    count: int


class MonthlyExpense(BaseModel):
    year: int
    month: int
    total: Money
    count: int


class UtilityStats(BaseModel):
    """Spending totals and breakdowns across all utility bills."""

    total_expenses: Money
    total_records: int
    category_breakdown: list[ExpenseBreakdown]
    payment_status_breakdown: list[ExpenseBreakdown]
    monthly_expenses: list[MonthlyExpense]
    recent_overdue: list[UtilityResponse]
