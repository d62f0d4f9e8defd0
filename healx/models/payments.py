"""Payment (invoice) tables using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

payments = Table(
    "payments",
    metadata,
    id_column(),
    Column("invoice_number", String(50), nullable=False, unique=True),
    Column("hospital_name", Text, nullable=False),
    Column("branch_name", Text),
    Column("invoice_date", Date, nullable=False, server_default=func.current_date()),
    # Patient reference plus snapshot
    Column("patient_id", Uuid, ForeignKey("patients.id"), nullable=True, index=True),
    Column("patient_name", Text, nullable=False),
    Column("patient_phone", String(20)),
    Column("patient_email", String(255)),
    Column("patient_address", Text),
    # Doctor reference plus snapshot
    Column("doctor_id", Uuid, ForeignKey("doctors.id"), nullable=True),
    Column("doctor_name", Text),
    Column("department", Text),
    # Amounts, all derived from payment_services on the server
    Column("subtotal", Numeric(12, 2), nullable=False),
    Column("discount", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("tax", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("amount_paid", Numeric(12, 2), nullable=False),
    Column("balance", Numeric(12, 2), nullable=False),
    Column("payment_method", String(20), nullable=False),
    Column("terms", Text),
    Column("note", Text),
    created_at_column(),
    updated_at_column(),
    CheckConstraint(
        "payment_method IN ('Cash', 'Card', 'Insurance', 'Online', 'Wallet')",
        name="payment_method",
    ),
    CheckConstraint("total_amount >= 0", name="total_non_negative"),
    CheckConstraint("amount_paid >= 0 AND amount_paid <= total_amount", name="amount_paid_range"),
)

payment_services = Table(
    "payment_services",
    metadata,
    id_column(),
    Column(
        "payment_id",
        Uuid,
        ForeignKey("payments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("position", Integer, nullable=False),
    Column("service_type", Text, nullable=False),
    Column("description", Text),
    Column("quantity", Integer, nullable=False, server_default=text("1")),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("subtotal", Numeric(12, 2), nullable=False),
    CheckConstraint("quantity >= 1", name="quantity_positive"),
    CheckConstraint("unit_price >= 0", name="unit_price_non_negative"),
)
