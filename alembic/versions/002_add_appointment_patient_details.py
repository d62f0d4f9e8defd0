"""Add patient details and emergency contact to appointments

Revision ID: 002
Revises: 001
Create Date: 2026-10-20 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

NEW_COLUMNS = (
    ("patient_gender", sa.String(length=10)),
    ("patient_date_of_birth", sa.Date()),
    ("patient_blood_group", sa.String(length=3)),
    ("patient_allergies", sa.Text()),
    ("emergency_contact_name", sa.Text()),
    ("emergency_contact_phone", sa.String(length=20)),
    ("emergency_contact_relationship", sa.String(length=50)),
)


def upgrade() -> None:
    """Add the optional booking snapshot columns."""
    for name, type_ in NEW_COLUMNS:
        op.add_column("appointments", sa.Column(name, type_, nullable=True))


def downgrade() -> None:
    """Drop the booking snapshot columns."""
    for name, _ in reversed(NEW_COLUMNS):
        op.drop_column("appointments", name)
