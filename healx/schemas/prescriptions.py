"""Prescription schemas."""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, computed_field

from healx.core.identifiers import prescription_code


class BloodGroup(str, Enum):
    """ABO/Rh blood groups."""

    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class Medicine(BaseModel):
    """One prescribed medicine."""

    name: str = Field(..., min_length=1, max_length=200)
    dosage: str = Field(..., min_length=1, max_length=100)
    frequency: str = Field(..., min_length=1, max_length=100)
    duration: str = Field(..., min_length=1, max_length=100)
    notes: str = ""


class PrescriptionBase(BaseModel):
    """Fields shared by create, update and response."""

    prescribed_on: date | None = None
    diagnosis: str = Field(..., min_length=3)
    medicines: list[Medicine] = Field(..., min_length=1)
    notes: str | None = None
    patient_id: str = Field(..., min_length=1, max_length=64)
    patient_name: str = Field(..., min_length=1, max_length=200)
    patient_email: EmailStr | None = None
    patient_phone: str | None = Field(None, max_length=20)
    patient_gender: str | None = Field(None, max_length=10)
    patient_blood_group: BloodGroup | None = None
    patient_date_of_birth: date | None = None
    patient_allergies: list[str] = Field(default_factory=list)
    doctor_id: str = Field(..., min_length=1, max_length=64)
    doctor_name: str = Field(..., min_length=1, max_length=200)
    doctor_specialization: str | None = None


class PrescriptionCreate(PrescriptionBase):
    """Schema for creating a prescription."""


class PrescriptionUpdate(PrescriptionBase):
    """Full replacement of a prescription's clinical content."""


class PrescriptionResponse(PrescriptionBase):
    """Prescription response schema."""

    id: UUID
    prescribed_on: date
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def prescription_code(self) -> str:
        """Short display code, e.g. RX-1A2B3C4D."""
        return prescription_code(self.id)
