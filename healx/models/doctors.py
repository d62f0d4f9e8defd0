"""Doctor model definition using SQLAlchemy Core."""

from sqlalchemy import JSON, Column, String, Table, Text

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

doctors = Table(
    "doctors",
    metadata,
    id_column(),
    Column("name", Text, nullable=False),
    Column("specialization", String(200), index=True),
    Column("email", String(255)),
    Column("phone", String(20)),
    # [{"day": "Monday", "start_time": "09:00", "end_time": "17:00"}, ...]
    Column("available_hours", JSON, nullable=False, default=list),
    created_at_column(),
    updated_at_column(),
)
