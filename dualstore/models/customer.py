"""
DualStore — Customer SQLAlchemy Model
=======================================

What:  ORM model representing the `customer` table in PostgreSQL.
Why:   Maps rows to Python objects so the customer service can issue typed,
       parameterized insert/select/update/delete statements.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by CustomerService and by alembic/env.py.

Table Design:
    - customer_id: UUID primary key. The database default is gen_random_uuid()
      (see the migration); the ORM also supplies uuid4 so inserts work on
      backends without that function.
    - customer_name / customer_surname: nullable VARCHAR(255). The API always
      writes both, but rows inserted by other tools may leave them NULL.
"""

import uuid
from typing import Optional

from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dualstore.database import Base


class Customer(Base):
    """A customer row."""

    __tablename__ = "customer"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Generated identifier",
    )

    customer_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Given name",
    )

    customer_surname: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Family name",
    )

    # GET /api/pg orders by name
    __table_args__ = (
        Index("idx_customer_name", customer_name),
    )

    def __repr__(self) -> str:
        return (
            f"<Customer(customer_id={self.customer_id}, "
            f"customer_name='{self.customer_name}', customer_surname='{self.customer_surname}')>"
        )
