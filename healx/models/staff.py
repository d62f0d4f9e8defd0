"""Staff account model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    String,
    Table,
    Text,
    true,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

staff = Table(
    "staff",
    metadata,
    id_column(),
    Column("employee_id", String(40), nullable=False, unique=True),
    Column("name", Text, nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("role", String(30), nullable=False, index=True),
    Column("department", String(30), nullable=False),
    Column("specialization", Text),
    Column("is_active", Boolean, nullable=False, server_default=true()),
    created_at_column(),
    updated_at_column(),
    Column("last_login_at", DateTime(timezone=True)),
    CheckConstraint(
        "role IN ('admin', 'receptionist', 'doctor', 'financial_manager')",
        name="role",
    ),
)
