"""Prescription model definition using SQLAlchemy Core."""

from sqlalchemy import JSON, Column, Date, Index, String, Table, Text

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

prescriptions = Table(
    "prescriptions",
    metadata,
    id_column(),
    Column("prescribed_on", Date, nullable=False),
    Column("diagnosis", Text, nullable=False),
    # [{"name", "dosage", "frequency", "duration", "notes"}, ...]
    Column("medicines", JSON, nullable=False),
    Column("notes", Text),
    # Patient snapshot; patient_id holds the patient code or id as given
    Column("patient_id", String(64), nullable=False),
    Column("patient_name", Text, nullable=False),
    Column("patient_email", String(255)),
    Column("patient_phone", String(20)),
    Column("patient_gender", String(10)),
    Column("patient_blood_group", String(5)),
    Column("patient_date_of_birth", Date),
    Column("patient_allergies", JSON),
    # Doctor snapshot
    Column("doctor_id", String(64), nullable=False),
    Column("doctor_name", Text, nullable=False),
    Column("doctor_specialization", Text),
    created_at_column(),
    updated_at_column(),
    Index("ix_prescriptions_patient_created", "patient_id", "created_at"),
    Index("ix_prescriptions_doctor_created", "doctor_id", "created_at"),
)
