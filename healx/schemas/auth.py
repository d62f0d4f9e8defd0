"""Authentication and account schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class StaffRole(str, Enum):
    """Staff roles; each maps to one department."""

    ADMIN = "admin"
    RECEPTIONIST = "receptionist"
    DOCTOR = "doctor"
    FINANCIAL_MANAGER = "financial_manager"


ROLE_DEPARTMENTS: dict[StaffRole, str] = {
    StaffRole.ADMIN: "administration",
    StaffRole.RECEPTIONIST: "reception",
    StaffRole.DOCTOR: "medical",
    StaffRole.FINANCIAL_MANAGER: "finance",
}

PATIENT_ROLE = "Patient"


class Gender(str, Enum):
    """Gender values accepted on patient records."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Token(BaseModel):
    """JWT token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenRefresh(BaseModel):
    """Token refresh / logout request schema."""

    refresh_token: str


class LoginRequest(BaseModel):
    """Email and password credentials."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class PatientRegister(BaseModel):
    """Patient self-registration."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    phone: str | None = Field(None, max_length=20)
    age: int | None = Field(None, ge=0, le=150)
    gender: Gender | None = None
    address: str | None = None
    medical_history: str | None = None
    allergies: str | None = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class PatientUpdate(BaseModel):
    """Profile edit; email and credentials are not editable here."""

    name: str | None = Field(None, min_length=1, max_length=200)
    phone: str | None = Field(None, max_length=20)
    age: int | None = Field(None, ge=0, le=150)
    gender: Gender | None = None
    address: str | None = None
    medical_history: str | None = None
    allergies: str | None = None


class PatientResponse(BaseModel):
    """Patient profile without credentials."""

    id: UUID
    patient_code: str
    name: str
    email: EmailStr
    phone: str | None = None
    age: int | None = None
    gender: Gender | None = None
    address: str | None = None
    medical_history: str | None = None
    allergies: str | None = None
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class StaffCreate(BaseModel):
    """Staff account creation by an admin."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    role: StaffRole
    specialization: str | None = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class StaffResponse(BaseModel):
    """Staff account without credentials."""

    id: UUID
    employee_id: str
    name: str
    email: EmailStr
    role: StaffRole
    department: str
    specialization: str | None = None
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class PatientLoginResponse(Token):
    """Tokens plus the authenticated patient."""

    user: PatientResponse


class StaffLoginResponse(Token):
    """Tokens plus the authenticated staff member."""

    user: StaffResponse


class Principal(BaseModel):
    """Caller identity decoded from an access token."""

    id: UUID
    role: str

    @property
    def is_patient(self) -> bool:
        return self.role == PATIENT_ROLE

    @property
    def is_staff(self) -> bool:
        return self.role in {r.value for r in StaffRole}

    @property
    def is_admin(self) -> bool:
        return self.role == StaffRole.ADMIN.value
