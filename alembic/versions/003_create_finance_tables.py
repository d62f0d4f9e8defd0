"""Create payroll and utility expense tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-20 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
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
    """Create payrolls and utility_expenses."""
    op.create_table(
        "payrolls",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("payroll_id", sa.String(length=50), nullable=False),
        sa.Column("employee_id", sa.String(length=50), nullable=False),
        sa.Column("employee_name", sa.Text(), nullable=False),
        sa.Column("payroll_month", sa.String(length=10), nullable=False),
        sa.Column("payroll_year", sa.Integer(), nullable=False),
        sa.Column("gross_salary", sa.Numeric(12, 2), nullable=False),
        sa.Column("bonuses", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("deductions", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("epf", sa.Numeric(12, 2), nullable=False),
        sa.Column("etf", sa.Numeric(12, 2), nullable=False),
        sa.Column("net_salary", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('Pending', 'Processed', 'Paid')", name="ck_payrolls_status"
        ),
        sa.CheckConstraint("gross_salary >= 0", name="ck_payrolls_gross_non_negative"),
        sa.CheckConstraint("net_salary >= 0", name="ck_payrolls_net_non_negative"),
        sa.PrimaryKeyConstraint("id", name="pk_payrolls"),
        sa.UniqueConstraint("payroll_id", name="uq_payrolls_payroll_id"),
        sa.UniqueConstraint(
            "employee_id", "payroll_month", "payroll_year", name="uq_payrolls_employee_period"
        ),
    )
    op.create_index("ix_payrolls_employee_id", "payrolls", ["employee_id"])

    op.create_table(
        "utility_expenses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("utility_id", sa.String(length=6), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("billing_period_start", sa.Date(), nullable=False),
        sa.Column("billing_period_end", sa.Date(), nullable=False),
        sa.Column(
            "payment_status", sa.String(length=20), nullable=False, server_default="Pending"
        ),
        sa.Column("vendor_name", sa.Text(), nullable=False),
        sa.Column("invoice_number", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("amount >= 0", name="ck_utility_expenses_amount_non_negative"),
        sa.CheckConstraint(
            "billing_period_end >= billing_period_start",
            name="ck_utility_expenses_billing_period",
        ),
        sa.CheckConstraint(
            "payment_status IN ('Pending', 'Paid', 'Overdue')",
            name="ck_utility_expenses_payment_status",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_utility_expenses"),
        sa.UniqueConstraint("utility_id", name="uq_utility_expenses_utility_id"),
    )
    op.create_index(
        "ix_utility_expenses_category_status",
        "utility_expenses",
        ["category", "payment_status"],
    )


def downgrade() -> None:
    """Drop payrolls and utility_expenses."""
    op.drop_index("ix_utility_expenses_category_status", table_name="utility_expenses")
    op.drop_table("utility_expenses")
    op.drop_index("ix_payrolls_employee_id", table_name="payrolls")
    op.drop_table("payrolls")
