"""Supplier schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class SupplierCategory(str, Enum):
    MEDICAL_EQUIPMENT = "medical_equipment"
    PHARMACEUTICALS = "pharmaceuticals"
    CONSUMABLES = "consumables"
    SERVICES = "services"


class SupplierStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLACKLISTED = "blacklisted"


class Address(BaseModel):
    street: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)


class SupplierBase(BaseModel):
    """Base supplier schema."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20, pattern=r"^\+?[\d\s\-()]+$")
    category: SupplierCategory
    address: Address | None = None
    status: SupplierStatus = SupplierStatus.ACTIVE
    rating: int = Field(3, ge=1, le=5)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class SupplierCreate(SupplierBase):
    """Schema for creating a supplier."""


class SupplierUpdate(BaseModel):
    """Schema for updating a supplier."""

    name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, min_length=5, max_length=20, pattern=r"^\+?[\d\s\-()]+$")
    category: SupplierCategory | None = None
    address: Address | None = None
    status: SupplierStatus | None = None
    rating: int | None = Field(None, ge=1, le=5)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class SupplierResponse(SupplierBase):
    """Schema for supplier response."""

    id: UUID
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SupplierFilters(BaseModel):
    search: str | None = None
    category: SupplierCategory | None = None
    status: SupplierStatus | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
