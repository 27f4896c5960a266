"""create users table

Revision ID: 4c1e2a9b7d30
Revises:
Create Date: 2026-10-19 09:12:44.108233

Creates the users table backing the directory. Email uniqueness is enforced
by a unique index, which is the only guard against concurrent creates with
the same address.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "4c1e2a9b7d30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users table.

    Key constraints:
    - id is an identity column assigned by the database
    - Unique index on email
    - age in [0, 150] and sex in (male, female, other) when present
    """
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, sa.Identity(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("surname", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("sex", sa.String(16), nullable=True),
        sa.Column("age", sa.Integer, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
        ),
        sa.CheckConstraint("age >= 0 AND age <= 150", name="ck_users_age_range"),
        sa.CheckConstraint(
            "sex IN ('male', 'female', 'other')", name="ck_users_sex"
        ),
    )

    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Newest-first listing
    op.create_index("ix_users_created_at", "users", ["created_at"])


def downgrade() -> None:
    """Drop users table and its indexes."""
    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
