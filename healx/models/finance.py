"""Payroll and utility expense tables using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)

from healx.models.base import created_at_column, id_column, metadata, updated_at_column

payrolls = Table(
    "payrolls",
    metadata,
    id_column(),
    Column("payroll_id", String(50), nullable=False, unique=True),
    Column("employee_id", String(50), nullable=False, index=True),
    Column("employee_name", Text, nullable=False),
    # Period; month is the English month name
    Column("payroll_month", String(10), nullable=False),
    Column("payroll_year", Integer, nullable=False),
    # Amounts; epf, etf and net_salary are derived on the server
    Column("gross_salary", Numeric(12, 2), nullable=False),
    Column("bonuses", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("deductions", Numeric(12, 2), nullable=False, server_default=text("0")),
    Column("epf", Numeric(12, 2), nullable=False),
    Column("etf", Numeric(12, 2), nullable=False),
    Column("net_salary", Numeric(12, 2), nullable=False),
    Column("status", String(20), nullable=False, server_default=text("'Pending'")),
    created_at_column(),
    updated_at_column(),
    # One entry per employee per period
    UniqueConstraint(
        "employee_id", "payroll_month", "payroll_year", name="uq_payrolls_employee_period"
    ),
    CheckConstraint("status IN ('Pending', 'Processed', 'Paid')", name="status"),
    CheckConstraint("gross_salary >= 0", name="gross_non_negative"),
    CheckConstraint("net_salary >= 0", name="net_non_negative"),
)

UTILITY_CATEGORIES = (
    "Electricity",
    "Water & Sewage",
    "Waste Management",
    "Internet & Communication",
    "Generator Fuel",
    "Other",
)

utility_expenses = Table(
    "utility_expenses",
    metadata,
    id_column(),
    # Six characters of [A-Z0-9]; the public identifier used in URLs
    Column("utility_id", String(6), nullable=False, unique=True),
    Column("category", String(50), nullable=False),
    Column("description", Text, nullable=False),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("billing_period_start", Date, nullable=False),
    Column("billing_period_end", Date, nullable=False),
    Column("payment_status", String(20), nullable=False, server_default=text("'Pending'")),
    Column("vendor_name", Text, nullable=False),
    Column("invoice_number", String(100)),
    created_at_column(),
    updated_at_column(),
    CheckConstraint("amount >= 0", name="amount_non_negative"),
    CheckConstraint("billing_period_end >= billing_period_start", name="billing_period"),
    CheckConstraint("payment_status IN ('Pending', 'Paid', 'Overdue')", name="payment_status"),
    Index("ix_utility_expenses_category_status", "category", "payment_status"),
)
