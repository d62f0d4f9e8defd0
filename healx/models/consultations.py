"""Consultation model definition using SQLAlchemy Core."""

from sqlalchemy import Column, Date, ForeignKey, String, Table, Text, Uuid, text

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

consultations = Table(
    "consultations",
    metadata,
    id_column(),
    Column("doctor", Text, nullable=False),
    Column("doctor_id", Uuid, ForeignKey("doctors.id"), nullable=True, index=True),
    Column("patient_id", Uuid, ForeignKey("patients.id"), nullable=True, index=True),
    Column("consultation_date", Date, nullable=False),
    Column("consultation_time", String(5), nullable=False),
    Column("reason", Text, nullable=False),
    Column("notes", Text, nullable=False, server_default=text("''")),
    created_at_column(),
    updated_at_column(),
)
