"""Product model definition using SQLAlchemy Core."""

from sqlalchemy import CheckConstraint, Column, Numeric, Table, Text

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

products = Table(
    "products",
    metadata,
    id_column(),
    Column("name", Text, nullable=False),
    Column("price", Numeric(12, 2), nullable=False),
    Column("description", Text, nullable=False),
    Column("image_url", Text, nullable=False),
    created_at_column(),
    updated_at_column(),
    CheckConstraint("price >= 0", name="price_non_negative"),
)
