"""Supplier model definition using SQLAlchemy Core."""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Integer,
    String,
    Table,
    text,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

suppliers = Table(
    "suppliers",
    metadata,
    id_column(),
    Column("name", String(100), nullable=False),
    # Stored lowercase
    Column("email", String(255), nullable=False, unique=True),
    Column("phone", String(20), nullable=False),
    Column("category", String(30), nullable=False, index=True),
    # {"street", "city", "state", "zip_code", "country"}
    Column("address", JSON),
    Column("status", String(20), nullable=False, server_default=text("'active'"), index=True),
    Column("rating", Integer, nullable=False, server_default=text("3")),
    created_at_column(),
    updated_at_column(),
    CheckConstraint(
        "category IN ('medical_equipment', 'pharmaceuticals', 'consumables', 'services')",
        name="category",
    ),
    CheckConstraint("status IN ('active', 'inactive', 'blacklisted')", name="status"),
    CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
)
