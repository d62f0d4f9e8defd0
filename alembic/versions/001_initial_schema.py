"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    """Upgrade database schema."""
    # Accounts
    op.create_table(
        "patients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("patient_code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(length=10), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("medical_history", sa.Text(), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="Patient"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("gender IN ('Male', 'Female', 'Other')", name="ck_patients_gender"),
        sa.CheckConstraint("age IS NULL OR age >= 0", name="ck_patients_age_non_negative"),
        sa.PrimaryKeyConstraint("id", name="pk_patients"),
        sa.UniqueConstraint("patient_code", name="uq_patients_patient_code"),
        sa.UniqueConstraint("email", name="uq_patients_email"),
    )

    op.create_table(
        "staff",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.String(length=40), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.String(length=30), nullable=False),
        sa.Column("department", sa.String(length=30), nullable=False),
        sa.Column("specialization", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "role IN ('admin', 'receptionist', 'doctor', 'financial_manager')",
            name="ck_staff_role",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_staff"),
        sa.UniqueConstraint("employee_id", name="uq_staff_employee_id"),
        sa.UniqueConstraint("email", name="uq_staff_email"),
    )
    op.create_index("ix_staff_role", "staff", ["role"])

    op.create_table(
        "doctors",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("specialization", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("available_hours", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_doctors"),
    )
    op.create_index("ix_doctors_specialization", "doctors", ["specialization"])

    op.create_table(
        "suppliers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("category", sa.String(length=30), nullable=False),
        sa.Column("address", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("rating", sa.Integer(), nullable=False, server_default=sa.text("3")),
        *_timestamps(),
        sa.CheckConstraint(
            "category IN ('medical_equipment', 'pharmaceuticals', 'consumables', 'services')",
            name="ck_suppliers_category",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'blacklisted')", name="ck_suppliers_status"
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_suppliers_rating_range"),
        sa.PrimaryKeyConstraint("id", name="pk_suppliers"),
        sa.UniqueConstraint("email", name="uq_suppliers_email"),
    )
    op.create_index("ix_suppliers_category", "suppliers", ["category"])
    op.create_index("ix_suppliers_status", "suppliers", ["status"])

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        sa.PrimaryKeyConstraint("id", name="pk_products"),
    )

    # Booking
    op.create_table(
        "appointments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("doctor_id", sa.Uuid(), nullable=False),
        sa.Column("patient_id", sa.Uuid(), nullable=True),
        sa.Column("patient_name", sa.Text(), nullable=False),
        sa.Column("patient_email", sa.String(length=255), nullable=True),
        sa.Column("patient_phone", sa.String(length=20), nullable=True),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("appointment_time", sa.String(length=5), nullable=False),
        sa.Column(
            "appointment_type", sa.String(length=20), nullable=False, server_default="consultation"
        ),
        sa.Column("symptoms", sa.Text(), nullable=True),
        sa.Column("urgency", sa.String(length=20), nullable=False, server_default="normal"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('Pending', 'Approved', 'Completed', 'Cancelled')",
            name="ck_appointments_status",
        ),
        sa.CheckConstraint(
            "appointment_type IN ('consultation', 'follow-up', 'checkup', 'emergency')",
            name="ck_appointments_appointment_type",
        ),
        sa.CheckConstraint(
            "urgency IN ('normal', 'urgent', 'emergency')", name="ck_appointments_urgency"
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"], ["doctors.id"], name="fk_appointments_doctor_id_doctors"
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"], ["patients.id"], name="fk_appointments_patient_id_patients"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_appointments"),
    )
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_patient_email", "appointments", ["patient_email"])
    # One active booking per doctor slot; cancelled rows free the slot
    op.create_index(
        "uq_appointments_active_slot",
        "appointments",
        ["doctor_id", "appointment_date", "appointment_time"],
        unique=True,
        postgresql_where=sa.text("status <> 'Cancelled'"),
    )

    op.create_table(
        "consultations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("doctor", sa.Text(), nullable=False),
        sa.Column("doctor_id", sa.Uuid(), nullable=True),
        sa.Column("patient_id", sa.Uuid(), nullable=True),
        sa.Column("consultation_date", sa.Date(), nullable=False),
        sa.Column("consultation_time", sa.String(length=5), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["doctor_id"], ["doctors.id"], name="fk_consultations_doctor_id_doctors"
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"], ["patients.id"], name="fk_consultations_patient_id_patients"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_consultations"),
    )
    op.create_index("ix_consultations_doctor_id", "consultations", ["doctor_id"])
    op.create_index("ix_consultations_patient_id", "consultations", ["patient_id"])

    op.create_table(
        "prescriptions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("prescribed_on", sa.Date(), nullable=False),
        sa.Column("diagnosis", sa.Text(), nullable=False),
        sa.Column("medicines", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("patient_id", sa.String(length=64), nullable=False),
        sa.Column("patient_name", sa.Text(), nullable=False),
        sa.Column("patient_email", sa.String(length=255), nullable=True),
        sa.Column("patient_phone", sa.String(length=20), nullable=True),
        sa.Column("patient_gender", sa.String(length=10), nullable=True),
        sa.Column("patient_blood_group", sa.String(length=5), nullable=True),
        sa.Column("patient_date_of_birth", sa.Date(), nullable=True),
        sa.Column("patient_allergies", sa.JSON(), nullable=True),
        sa.Column("doctor_id", sa.String(length=64), nullable=False),
        sa.Column("doctor_name", sa.Text(), nullable=False),
        sa.Column("doctor_specialization", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_prescriptions"),
    )
    op.create_index(
        "ix_prescriptions_patient_created", "prescriptions", ["patient_id", "created_at"]
    )
    op.create_index("ix_prescriptions_doctor_created", "prescriptions", ["doctor_id", "created_at"])

    # Surgical inventory
    op.create_table(
        "surgical_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=40), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("min_stock_level", sa.Integer(), nullable=False, server_default=sa.text("10")),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("supplier_id", sa.Uuid(), nullable=True),
        sa.Column("supplier_name", sa.Text(), nullable=False),
        sa.Column("supplier_contact", sa.String(length=50), nullable=True),
        sa.Column("supplier_email", sa.String(length=255), nullable=True),
        sa.Column("location_room", sa.String(length=50), nullable=True),
        sa.Column("location_shelf", sa.String(length=50), nullable=True),
        sa.Column("location_bin", sa.String(length=50), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("batch_number", sa.String(length=100), nullable=True),
        sa.Column("serial_number", sa.String(length=100), nullable=True),
        sa.Column(
            "last_restocked",
            sa.DateTime(timezone=True),
            nullable=True,
            server_default=sa.text("now()"),
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 0", name="ck_surgical_items_quantity_non_negative"),
        sa.CheckConstraint(
            "min_stock_level >= 0", name="ck_surgical_items_min_stock_non_negative"
        ),
        sa.CheckConstraint("price >= 0", name="ck_surgical_items_price_non_negative"),
        sa.ForeignKeyConstraint(
            ["supplier_id"],
            ["suppliers.id"],
            name="fk_surgical_items_supplier_id_suppliers",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_surgical_items"),
    )
    op.create_index("ix_surgical_items_name", "surgical_items", ["name"])
    op.create_index("ix_surgical_items_category", "surgical_items", ["category"])
    op.create_index("ix_surgical_items_is_active", "surgical_items", ["is_active"])

    op.create_table(
        "disposal_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("item_name", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=40), nullable=True),
        sa.Column("quantity_disposed", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("disposed_by", sa.Text(), nullable=False),
        sa.Column(
            "disposed_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("estimated_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("disposal_type", sa.String(length=20), nullable=False, server_default="manual"),
        sa.Column("previous_quantity", sa.Integer(), nullable=False),
        sa.Column("remaining_quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint("quantity_disposed >= 1", name="ck_disposal_records_quantity_positive"),
        sa.ForeignKeyConstraint(
            ["item_id"], ["surgical_items.id"], name="fk_disposal_records_item_id_surgical_items"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_disposal_records"),
    )
    op.create_index("ix_disposal_records_item_id", "disposal_records", ["item_id"])
    op.create_index("ix_disposal_records_disposed_date", "disposal_records", ["disposed_date"])

    op.create_table(
        "restock_orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("item_name", sa.Text(), nullable=False),
        sa.Column("current_stock", sa.Integer(), nullable=False),
        sa.Column("min_stock_level", sa.Integer(), nullable=False),
        sa.Column("reorder_quantity", sa.Integer(), nullable=False),
        sa.Column("supplier_id", sa.Uuid(), nullable=True),
        sa.Column("supplier_name", sa.Text(), nullable=False),
        sa.Column("supplier_contact", sa.String(length=50), nullable=True),
        sa.Column("supplier_email", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("urgency", sa.String(length=20), nullable=False, server_default="MEDIUM"),
        sa.Column("estimated_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("actual_cost", sa.Numeric(12, 2), nullable=True),
        sa.Column("expected_delivery", sa.Date(), nullable=True),
        sa.Column("actual_delivery", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'ORDERED', 'DELIVERED', 'CANCELLED', 'ERROR')",
            name="ck_restock_orders_status",
        ),
        sa.CheckConstraint(
            "urgency IN ('CRITICAL', 'HIGH', 'MEDIUM', 'LOW')", name="ck_restock_orders_urgency"
        ),
        sa.CheckConstraint(
            "reorder_quantity >= 1", name="ck_restock_orders_reorder_quantity_positive"
        ),
        sa.ForeignKeyConstraint(
            ["item_id"], ["surgical_items.id"], name="fk_restock_orders_item_id_surgical_items"
        ),
        sa.ForeignKeyConstraint(
            ["supplier_id"],
            ["suppliers.id"],
            name="fk_restock_orders_supplier_id_suppliers",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_restock_orders"),
    )
    op.create_index("ix_restock_orders_item_id", "restock_orders", ["item_id"])
    op.create_index("ix_restock_orders_status", "restock_orders", ["status"])

    # Procurement
    op.create_table(
        "purchase_orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_number", sa.String(length=40), nullable=False),
        sa.Column("supplier_id", sa.Uuid(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column(
            "order_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("expected_delivery", sa.Date(), nullable=True),
        sa.Column("actual_delivery", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False, server_default=sa.text("3")),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'ordered', 'received', 'cancelled')",
            name="ck_purchase_orders_status",
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_purchase_orders_rating_range"),
        sa.ForeignKeyConstraint(
            ["supplier_id"], ["suppliers.id"], name="fk_purchase_orders_supplier_id_suppliers"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_purchase_orders"),
        sa.UniqueConstraint("order_number", name="uq_purchase_orders_order_number"),
    )
    op.create_index("ix_purchase_orders_supplier_id", "purchase_orders", ["supplier_id"])
    op.create_index("ix_purchase_orders_status", "purchase_orders", ["status"])

    op.create_table(
        "purchase_order_items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("purchase_order_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("product", sa.String(length=100), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint("quantity >= 1", name="ck_purchase_order_items_quantity_positive"),
        sa.CheckConstraint("unit_price > 0", name="ck_purchase_order_items_unit_price_positive"),
        sa.ForeignKeyConstraint(
            ["purchase_order_id"],
            ["purchase_orders.id"],
            name="fk_purchase_order_items_purchase_order_id_purchase_orders",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_purchase_order_items"),
    )
    op.create_index(
        "ix_purchase_order_items_purchase_order_id", "purchase_order_items", ["purchase_order_id"]
    )

    # Billing
    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("invoice_number", sa.String(length=50), nullable=False),
        sa.Column("hospital_name", sa.Text(), nullable=False),
        sa.Column("branch_name", sa.Text(), nullable=True),
        sa.Column(
            "invoice_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")
        ),
        sa.Column("patient_id", sa.Uuid(), nullable=True),
        sa.Column("patient_name", sa.Text(), nullable=False),
        sa.Column("patient_phone", sa.String(length=20), nullable=True),
        sa.Column("patient_email", sa.String(length=255), nullable=True),
        sa.Column("patient_address", sa.Text(), nullable=True),
        sa.Column("doctor_id", sa.Uuid(), nullable=True),
        sa.Column("doctor_name", sa.Text(), nullable=True),
        sa.Column("department", sa.Text(), nullable=True),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("tax", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("amount_paid", sa.Numeric(12, 2), nullable=False),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("terms", sa.Text(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "payment_method IN ('Cash', 'Card', 'Insurance', 'Online', 'Wallet')",
            name="ck_payments_payment_method",
        ),
        sa.CheckConstraint("total_amount >= 0", name="ck_payments_total_non_negative"),
        sa.CheckConstraint(
            "amount_paid >= 0 AND amount_paid <= total_amount",
            name="ck_payments_amount_paid_range",
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"], ["patients.id"], name="fk_payments_patient_id_patients"
        ),
        sa.ForeignKeyConstraint(["doctor_id"], ["doctors.id"], name="fk_payments_doctor_id_doctors"),
        sa.PrimaryKeyConstraint("id", name="pk_payments"),
        sa.UniqueConstraint("invoice_number", name="uq_payments_invoice_number"),
    )
    op.create_index("ix_payments_patient_id", "payments", ["patient_id"])

    op.create_table(
        "payment_services",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("payment_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("service_type", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint("quantity >= 1", name="ck_payment_services_quantity_positive"),
        sa.CheckConstraint("unit_price >= 0", name="ck_payment_services_unit_price_non_negative"),
        sa.ForeignKeyConstraint(
            ["payment_id"],
            ["payments.id"],
            name="fk_payment_services_payment_id_payments",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_payment_services"),
    )
    op.create_index("ix_payment_services_payment_id", "payment_services", ["payment_id"])


def downgrade() -> None:
    """Downgrade database schema."""
    # Children before parents; indexes go with their tables
    for table in (
        "payment_services",
        "payments",
        "purchase_order_items",
        "purchase_orders",
        "restock_orders",
        "disposal_records",
        "surgical_items",
        "prescriptions",
        "consultations",
        "appointments",
        "products",
        "suppliers",
        "doctors",
        "staff",
        "patients",
    ):
        op.drop_table(table)
