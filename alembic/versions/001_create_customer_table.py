"""Create customer table

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Creates the `customer` table behind /api/pg.
How:   UUID primary key generated by gen_random_uuid() (built into PostgreSQL 13+).

Rollback: downgrade() drops the table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "customer",
        sa.Column(
            "customer_id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Generated identifier",
        ),
        sa.Column(
            "customer_name",
            sa.String(255),
            nullable=True,
            comment="Given name",
        ),
        sa.Column(
            "customer_surname",
            sa.String(255),
            nullable=True,
            comment="Family name",
        ),
        sa.PrimaryKeyConstraint("customer_id"),
    )

    # GET /api/pg orders by customer_name
    op.create_index("idx_customer_name", "customer", ["customer_name"])


def downgrade() -> None:
    op.drop_index("idx_customer_name", table_name="customer")
    op.drop_table("customer")
