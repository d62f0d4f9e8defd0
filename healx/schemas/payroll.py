"""Payroll schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from healx.schemas.common import Money, NonBlankStr


class PayrollStatus(str, Enum):
    PENDING = "Pending"
    PROCESSED = "Processed"
    PAID = "Paid"


PAYROLL_TRANSITIONS: dict[PayrollStatus, frozenset[PayrollStatus]] = {
    PayrollStatus.PENDING: frozenset({PayrollStatus.PROCESSED}),
    PayrollStatus.PROCESSED: frozenset({PayrollStatus.PAID}),
    PayrollStatus.PAID: frozenset(),
}


class PayrollMonth(str, Enum):
    JANUARY = "January"
    FEBRUARY = "February"
    MARCH = "March"
    APRIL = "April"
    MAY = "May"
    JUNE = "June"
    JULY = "July"
    AUGUST = "August"
    SEPTEMBER = "September"
    OCTOBER = "October"
    NOVEMBER = "November"
    DECEMBER = "December"

    @property
    def number(self) -> int:
        return list(PayrollMonth).index(self) + 1


def normalize_month(value: object) -> object:
    if isinstance(value, str):
        return value.strip().capitalize()
    return value


class PayrollCreate(BaseModel):
    """
    Payroll entry for one employee and month.

    EPF, ETF and net salary are computed on the server; a payroll id is
    generated when none is given.
    """

    payroll_id: str | None = Field(None, min_length=1, max_length=50)
    employee_id: NonBlankStr = Field(..., max_length=50)
    employee_name: NonBlankStr = Field(..., max_length=200)
    gross_salary: Money = Field(..., ge=0)
    bonuses: Money = Field(0, ge=0)
    deductions: Money = Field(0, ge=0)
    payroll_month: PayrollMonth
    payroll_year: int = Field(..., ge=2000, le=2100)

    model_config = {"extra": "ignore"}

    @field_validator("payroll_month", mode="before")
    @classmethod
    def normalize_payroll_month(cls, v: object) -> object:
        return normalize_month(v)


class PayrollUpdate(BaseModel):
    """Editable fields of an unpaid payroll entry."""

    employee_name: NonBlankStr | None = Field(None, max_length=200)
    gross_salary: Money | None = Field(None, ge=0)
    bonuses: Money | None = Field(None, ge=0)
    deductions: Money | None = Field(None, ge=0)

    model_config = {"extra": "ignore"}


class PayrollStatusUpdate(BaseModel):
    status: PayrollStatus


class PayrollResponse(BaseModel):
    id: UUID
    payroll_id: str
    employee_id: str
    employee_name: str
    payroll_month: PayrollMonth
    payroll_year: int
    gross_salary: Money
    bonuses: Money
    deductions: Money
    epf: Money
    etf: Money
    net_salary: Money
    status: PayrollStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PayrollFilters(BaseModel):
    employee_id: str | None = None
    payroll_month: PayrollMonth | None = None
    payroll_year: int | None = None
    status: PayrollStatus | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class PayrollSummary(BaseModel):
    """Totals for a period, or for all periods when none is given."""

    total_employees: int
    total_gross_salary: Money
    total_deductions: Money
    total_bonuses: Money
    total_epf: Money
    total_etf: Money
    total_net_salary: Money
    pending_payrolls: int
    processed_payrolls: int
    paid_payrolls: int
