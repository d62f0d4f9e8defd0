"""Purchase order tables using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Uuid,
    func,
    text,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

purchase_orders = Table(
    "purchase_orders",
    metadata,
    id_column(),
    Column("order_number", String(40), nullable=False, unique=True),
    Column("supplier_id", Uuid, ForeignKey("suppliers.id"), nullable=False, index=True),
    # Always sum(purchase_order_items.total_price)
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("status", String(20), nullable=False, server_default=text("'pending'"), index=True),
    Column("order_date", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("expected_delivery", Date),
    Column("actual_delivery", DateTime(timezone=True)),
    Column("notes", String(500)),
    Column("rating", Integer, nullable=False, server_default=text("3")),
    Column("created_by", Uuid),
    created_at_column(),
    updated_at_column(),
    CheckConstraint(
        "status IN ('pending', 'approved', 'ordered', 'received', 'cancelled')",
        name="status",
    ),
    CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
)

purchase_order_items = Table(
    "purchase_order_items",
    metadata,
    id_column(),
    Column(
        "purchase_order_id",
        Uuid,
        ForeignKey("purchase_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("position", Integer, nullable=False),
    Column("product", String(100), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("total_price", Numeric(12, 2), nullable=False),
    CheckConstraint("quantity >= 1", name="quantity_positive"),
    CheckConstraint("unit_price > 0", name="unit_price_positive"),
)
