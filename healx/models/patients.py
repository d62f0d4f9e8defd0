"""Patient model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    Table,
    Text,
    text,
    true,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

patients = Table(
    "patients",
    metadata,
    id_column(),
    # Human-readable code, e.g. PT-2026-7K3Q9A
    Column("patient_code", String(20), nullable=False, unique=True),
    Column("name", Text, nullable=False),
    # Stored lowercase
    Column("email", String(255), nullable=False, unique=True),
    Column("phone", String(20)),
    Column("age", Integer),
    Column("gender", String(10)),
    Column("address", Text),
    Column("medical_history", Text),
    Column("allergies", Text),
    # Credentials
    Column("password_hash", Text, nullable=False),
    Column("role", String(20), nullable=False, server_default=text("'Patient'")),
    Column("is_active", Boolean, nullable=False, server_default=true()),
    # Audit
    created_at_column(),
    updated_at_column(),
    Column("last_login_at", DateTime(timezone=True)),
    CheckConstraint("gender IN ('Male', 'Female', 'Other')", name="gender"),
    CheckConstraint("age IS NULL OR age >= 0", name="age_non_negative"),
)
