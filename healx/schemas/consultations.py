"""Consultation schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from healx.schemas.common import TimeOfDay


class ConsultationCreate(BaseModel):
    """Schema for recording a consultation."""

    doctor: str = Field(..., min_length=1, max_length=200)
    doctor_id: UUID | None = None
    patient_id: UUID | None = None
    consultation_date: date
    consultation_time: TimeOfDay
    reason: str = Field(..., min_length=1, max_length=1000)
    notes: str = Field("", max_length=5000)


class ConsultationResponse(ConsultationCreate):
    """Consultation response schema."""

    id: UUID
    consultation_time: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
