"""Surgical inventory tables using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
    true,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

surgical_items = Table(
    "surgical_items",
    metadata,
    id_column(),
    Column("name", String(100), nullable=False, index=True),
    Column("category", String(40), nullable=False, index=True),
    Column("description", String(500)),
    Column("quantity", Integer, nullable=False),
    Column("min_stock_level", Integer, nullable=False, server_default=text("10")),
    Column("price", Numeric(12, 2), nullable=False),
    # Supplier reference plus contact snapshot
    Column("supplier_id", Uuid, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True),
    Column("supplier_name", Text, nullable=False),
    Column("supplier_contact", String(50)),
    Column("supplier_email", String(255)),
    # Storage location
    Column("location_room", String(50)),
    Column("location_shelf", String(50)),
    Column("location_bin", String(50)),
    Column("expiry_date", Date),
    Column("batch_number", String(100)),
    Column("serial_number", String(100)),
    Column("last_restocked", DateTime(timezone=True), server_default=func.now()),
    Column("is_active", Boolean, nullable=False, server_default=true(), index=True),
    created_at_column(),
    updated_at_column(),
    CheckConstraint("quantity >= 0", name="quantity_non_negative"),
    CheckConstraint("min_stock_level >= 0", name="min_stock_non_negative"),
    CheckConstraint("price >= 0", name="price_non_negative"),
)

disposal_records = Table(
    "disposal_records",
    metadata,
    id_column(),
    Column("item_id", Uuid, ForeignKey("surgical_items.id"), nullable=False, index=True),
    Column("item_name", Text, nullable=False),
    Column("category", String(40)),
    Column("quantity_disposed", Integer, nullable=False),
    Column("reason", Text, nullable=False),
    Column("disposed_by", Text, nullable=False),
    Column(
        "disposed_date",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    ),
    Column("estimated_value", Numeric(12, 2), nullable=False),
    Column("disposal_type", String(20), nullable=False, server_default=text("'manual'")),
    Column("previous_quantity", Integer, nullable=False),
    Column("remaining_quantity", Integer, nullable=False),
    Column("unit_price", Numeric(12, 2), nullable=False),
    CheckConstraint("quantity_disposed >= 1", name="quantity_positive"),
)

restock_orders = Table(
    "restock_orders",
    metadata,
    id_column(),
    Column("item_id", Uuid, ForeignKey("surgical_items.id"), nullable=False, index=True),
    Column("item_name", Text, nullable=False),
    # Snapshot at creation time
    Column("current_stock", Integer, nullable=False),
    Column("min_stock_level", Integer, nullable=False),
    Column("reorder_quantity", Integer, nullable=False),
    Column("supplier_id", Uuid, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True),
    Column("supplier_name", Text, nullable=False),
    Column("supplier_contact", String(50)),
    Column("supplier_email", String(255)),
    Column("status", String(20), nullable=False, server_default=text("'PENDING'"), index=True),
    Column("urgency", String(20), nullable=False, server_default=text("'MEDIUM'")),
    Column("estimated_cost", Numeric(12, 2)),
    Column("actual_cost", Numeric(12, 2)),
    Column("expected_delivery", Date),
    Column("actual_delivery", DateTime(timezone=True)),
    Column("approved_by", Text),
    Column("notes", Text),
    Column("error_message", Text),
    created_at_column(),
    updated_at_column(),
    CheckConstraint(
        "status IN ('PENDING', 'APPROVED', 'ORDERED', 'DELIVERED', 'CANCELLED', 'ERROR')",
        name="status",
    ),
    CheckConstraint("urgency IN ('CRITICAL', 'HIGH', 'MEDIUM', 'LOW')", name="urgency"),
    CheckConstraint("reorder_quantity >= 1", name="reorder_quantity_positive"),
)
