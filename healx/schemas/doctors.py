"""Doctor schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from healx.schemas.common import TimeOfDay


class Weekday(str, Enum):
    """Weekday names as stored in availability windows."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class AvailabilityWindow(BaseModel):
    """One bookable window on a weekday, inclusive at both ends."""

    day: Weekday
    start_time: TimeOfDay
    end_time: TimeOfDay

    @model_validator(mode="after")
    def validate_order(self) -> "AvailabilityWindow":
        """Start must not be after end."""
        if self.start_time > self.end_time:
            raise ValueError("start_time must not be after end_time")
        return self


class DoctorBase(BaseModel):
    """Base doctor schema."""

    name: str = Field(..., min_length=1, max_length=200)
    specialization: str | None = Field(None, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)
    available_hours: list[AvailabilityWindow] = Field(default_factory=list)


class DoctorCreate(DoctorBase):
    """Schema for creating a doctor."""


class DoctorUpdate(BaseModel):
    """Schema for updating a doctor."""

    name: str | None = Field(None, min_length=1, max_length=200)
    specialization: str | None = Field(None, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)
    available_hours: list[AvailabilityWindow] | None = None


class DoctorResponse(DoctorBase):
    """Doctor response schema."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
