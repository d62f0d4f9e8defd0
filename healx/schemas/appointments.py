"""Appointment schemas for request/response validation."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from healx.schemas.auth import Gender
from healx.schemas.common import TimeOfDay
from healx.schemas.prescriptions import BloodGroup


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "Pending"
    APPROVED = "Approved"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Allowed moves; Completed and Cancelled are terminal
APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.APPROVED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.APPROVED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}


class AppointmentType(str, Enum):
    """Kind of visit."""

    CONSULTATION = "consultation"
    FOLLOW_UP = "follow-up"
    CHECKUP = "checkup"
    EMERGENCY = "emergency"


class Urgency(str, Enum):
    """Patient-reported urgency."""

    NORMAL = "normal"
    URGENT = "urgent"
    EMERGENCY = "emergency"


class AppointmentCreate(BaseModel):
    """
    Booking request.

    Patients book for themselves and may omit the patient fields; staff book
    on behalf of a patient and must give at least ``patient_name`` or
    ``patient_id``.
    """

    doctor_id: UUID
    appointment_date: date
    appointment_time: TimeOfDay
    patient_id: UUID | None = None
    patient_name: str | None = Field(None, min_length=1, max_length=200)
    patient_email: EmailStr | None = None
    patient_phone: str | None = Field(None, max_length=20)
    patient_gender: Gender | None = None
    patient_date_of_birth: date | None = None
    patient_blood_group: BloodGroup | None = None
    patient_allergies: str | None = Field(None, max_length=1000)
    emergency_contact_name: str | None = Field(None, max_length=200)
    emergency_contact_phone: str | None = Field(None, max_length=20)
    emergency_contact_relationship: str | None = Field(None, max_length=50)
    appointment_type: AppointmentType = AppointmentType.CONSULTATION
    symptoms: str | None = Field(None, max_length=1000)
    urgency: Urgency = Urgency.NORMAL
    notes: str | None = Field(None, max_length=1000)

    @field_validator("patient_date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: date | None) -> date | None:
        if v is not None and v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class AppointmentUpdate(BaseModel):
    """Staff edit: reschedule or amend details."""

    doctor_id: UUID | None = None
    appointment_date: date | None = None
    appointment_time: TimeOfDay | None = None
    patient_phone: str | None = Field(None, max_length=20)
    patient_allergies: str | None = Field(None, max_length=1000)
    emergency_contact_name: str | None = Field(None, max_length=200)
    emergency_contact_phone: str | None = Field(None, max_length=20)
    emergency_contact_relationship: str | None = Field(None, max_length=50)
    appointment_type: AppointmentType | None = None
    symptoms: str | None = Field(None, max_length=1000)
    urgency: Urgency | None = None
    notes: str | None = Field(None, max_length=1000)


class AppointmentStatusUpdate(BaseModel):
    """Schema for updating appointment status."""

    status: AppointmentStatus
    notes: str | None = Field(None, max_length=1000)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    doctor_id: UUID
    patient_id: UUID | None = None
    patient_name: str
    patient_email: str | None = None
    patient_phone: str | None = None
    patient_gender: Gender | None = None
    patient_date_of_birth: date | None = None
    patient_blood_group: BloodGroup | None = None
    patient_allergies: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    emergency_contact_relationship: str | None = None
    appointment_date: date
    appointment_time: str
    appointment_type: AppointmentType
    symptoms: str | None = None
    urgency: Urgency
    notes: str | None = None
    status: AppointmentStatus
    cancelled_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AppointmentFilters(BaseModel):
    """Schema for appointment filtering."""

    patient_id: UUID | None = None
    patient_email: str | None = None
    doctor_id: UUID | None = None
    status: AppointmentStatus | None = None
    appointment_date: date | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
