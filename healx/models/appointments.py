"""Appointments table model using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    Uuid,
    text,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

APPOINTMENT_STATUSES = ("Pending", "Approved", "Completed", "Cancelled")

# Partial predicate shared by the unique slot index on every dialect
ACTIVE_SLOT = text("status <> 'Cancelled'")

appointments = Table(
    "appointments",
    metadata,
    id_column(),
    # References
    Column("doctor_id", Uuid, ForeignKey("doctors.id"), nullable=False, index=True),
    Column("patient_id", Uuid, ForeignKey("patients.id"), nullable=True, index=True),
    # Patient snapshot
    Column("patient_name", Text, nullable=False),
    Column("patient_email", String(255), index=True),
    Column("patient_phone", String(20)),
    Column("patient_gender", String(10)),
    Column("patient_date_of_birth", Date),
    Column("patient_blood_group", String(3)),
    Column("patient_allergies", Text),
    # Emergency contact
    Column("emergency_contact_name", Text),
    Column("emergency_contact_phone", String(20)),
    Column("emergency_contact_relationship", String(50)),
    # Slot; time is a zero-padded "HH:MM" string
    Column("appointment_date", Date, nullable=False),
    Column("appointment_time", String(5), nullable=False),
    # Details
    Column("appointment_type", String(20), nullable=False, server_default=text("'consultation'")),
    Column("symptoms", Text),
    Column("urgency", String(20), nullable=False, server_default=text("'normal'")),
    Column("notes", Text),
    # Status management
    Column("status", String(20), nullable=False, server_default=text("'Pending'")),
    Column("cancelled_at", DateTime(timezone=True)),
    # Audit
    created_at_column(),
    updated_at_column(),
    CheckConstraint(
        "status IN ('Pending', 'Approved', 'Completed', 'Cancelled')",
        name="status",
    ),
    CheckConstraint(
        "appointment_type IN ('consultation', 'follow-up', 'checkup', 'emergency')",
        name="appointment_type",
    ),
    CheckConstraint("urgency IN ('normal', 'urgent', 'emergency')", name="urgency"),
    Index(
        "uq_appointments_active_slot",
        "doctor_id",
        "appointment_date",
        "appointment_time",
        unique=True,
        postgresql_where=ACTIVE_SLOT,
        sqlite_where=ACTIVE_SLOT,
    ),
)
