"""Payment (invoice) schemas."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from healx.schemas.common import Money


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    INSURANCE = "Insurance"
    ONLINE = "Online"
    WALLET = "Wallet"


def normalize_payment_method(value: object) -> object:
    """Map any casing of a known method to its canonical spelling."""
    if isinstance(value, str):
        for method in PaymentMethod:
            if method.value.lower() == value.strip().lower():
                return method.value
    return value


class ServiceLineIn(BaseModel):
    """Billed service as sent by a client. Any ``subtotal`` sent is ignored."""

    service_type: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)
    quantity: int = Field(1, ge=1)
    unit_price: Money = Field(..., ge=0)

    model_config = {"extra": "ignore"}


class ServiceLineResponse(BaseModel):
    service_type: str
    description: str | None = None
    quantity: int
    unit_price: Money
    subtotal: Money

    model_config = {"from_attributes": True}


class PaymentCreate(BaseModel):
    """
    Invoice creation request.

    Subtotal, total and balance are computed on the server; an invoice
    number is generated when none is given.
    """

    invoice_number: str | None = Field(None, min_length=1, max_length=50)
    hospital_name: str | None = Field(None, max_length=200)
    branch_name: str | None = Field(None, max_length=200)
    invoice_date: date | None = None
    patient_id: UUID | None = None
    patient_name: str = Field(..., min_length=1, max_length=200)
    patient_phone: str | None = Field(None, max_length=20)
    patient_email: EmailStr | None = None
    patient_address: str | None = Field(None, max_length=500)
    doctor_id: UUID | None = None
    doctor_name: str | None = Field(None, max_length=200)
    department: str | None = Field(None, max_length=100)
    services: list[ServiceLineIn] = Field(..., min_length=1)
    discount: Money = Field(0, ge=0)
    tax: Money = Field(0, ge=0)
    amount_paid: Money = Field(0, ge=0)
    payment_method: PaymentMethod
    terms: str | None = None
    note: str | None = None

    model_config = {"extra": "ignore"}

    @field_validator("payment_method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        return normalize_payment_method(v)


class PaymentUpdate(BaseModel):
    """Fields that may change once an invoice is issued."""

    amount_paid: Money | None = Field(None, ge=0)
    payment_method: PaymentMethod | None = None
    patient_phone: str | None = Field(None, max_length=20)
    patient_email: EmailStr | None = None
    patient_address: str | None = Field(None, max_length=500)
    terms: str | None = None
    note: str | None = None

    model_config = {"extra": "ignore"}

    @field_validator("payment_method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        return normalize_payment_method(v)


class PaymentResponse(BaseModel):
    """Invoice as returned by the API."""

    id: UUID
    invoice_number: str
    hospital_name: str
    branch_name: str | None = None
    invoice_date: date
    patient_id: UUID | None = None
    patient_name: str
    patient_phone: str | None = None
    patient_email: str | None = None
    patient_address: str | None = None
    doctor_id: UUID | None = None
    doctor_name: str | None = None
    department: str | None = None
    services: list[ServiceLineResponse]
    subtotal: Money
    discount: Money
    tax: Money
    total_amount: Money
    amount_paid: Money
    balance: Money
    payment_method: PaymentMethod
    terms: str | None = None
    note: str | None = None
    created_at: datetime
    updated_at: datetime


class PaymentFilters(BaseModel):
    search: str | None = None
    payment_method: PaymentMethod | None = None
    patient_id: UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)

    @field_validator("payment_method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        return normalize_payment_method(v)


class MethodBreakdown(BaseModel):
    payment_method: PaymentMethod
    count: int
    total_amount: Money
    amount_paid: Money


class PaymentSummary(BaseModel):
    """Totals across all invoices."""

    total_invoices: int
    total_billed: Money
    total_collected: Money
    total_outstanding: Money
    by_method: list[MethodBreakdown]
