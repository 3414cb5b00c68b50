"""
DualStore — Customer Service (PostgreSQL adapter)
===================================================

What:  CRUD operations over the `customer` table.
Why:   Keeps SQL and driver error translation out of the route handlers.
How:   Each method issues one parameterized statement (two for update/delete,
       which read the row first) through the request's AsyncSession and maps
       rows to response models. Inserts and updates go through the unit of
       work (add/mutate + flush); reads and deletes are explicit statements.
Who:   Called by routes/customers.py.

Error Translation:
    malformed UUID                      → InvalidIdentifierError (INVALID_ID)
    no matching row                     → NotFoundError (NOT_FOUND)
    OperationalError / InterfaceError   → DatabaseError(CONNECTION)
    any other SQLAlchemyError           → DatabaseError(QUERY)

    The session itself is committed or rolled back by get_db_session.
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dualstore.database import translate_error
from dualstore.exceptions import DatabaseError, InvalidIdentifierError, NotFoundError
from dualstore.models.customer import Customer
from dualstore.schemas.customer import (
    CreateCustomerSchema,
    CustomerListResponse,
    CustomerResponse,
    SingleCustomerResponse,
)

logger = logging.getLogger(__name__)


def parse_customer_id(raw_id: str) -> uuid.UUID:
    """Parse a path id into a UUID, raising InvalidIdentifierError on garbage."""
    try:
        return uuid.UUID(raw_id)
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdentifierError(resource="customer", raw_id=str(raw_id))


def _translate(e: SQLAlchemyError, operation: str) -> DatabaseError:
    return translate_error(e, operation, resource="Customer")


def _to_single(customer: Customer, status: str = "success") -> SingleCustomerResponse:
    return SingleCustomerResponse(
        status=status,
        id=str(customer.customer_id),
        name=customer.customer_name or "",
        surname=customer.customer_surname or "",
    )


def _to_item(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        id=str(customer.customer_id),
        name=customer.customer_name or "",
        surname=customer.customer_surname or "",
    )


class CustomerService:
    """
    Stateless service; the session is passed in per call.

    Every public method returns a response model ready for serialization.
    """

    async def create_customer(
        self, db: AsyncSession, body: CreateCustomerSchema
    ) -> SingleCustomerResponse:
        """
        INSERT INTO customer (customer_id, customer_name, customer_surname) VALUES (...)

        flush() emits the INSERT inside the request transaction; the UUID is
        assigned client side so the response does not need a second round-trip.
        """
        customer = Customer(
            customer_id=uuid.uuid4(),
            customer_name=body.customer_name,
            customer_surname=body.customer_surname,
        )
        try:
            db.add(customer)
            await db.flush()
        except SQLAlchemyError as e:
            raise _translate(e, "insert")

        logger.info("Customer created: %s", customer.customer_id)
        return _to_single(customer)

    async def list_customers(
        self, db: AsyncSession, limit: int = 10, offset: int = 0
    ) -> CustomerListResponse:
        """
        SELECT * FROM customer ORDER BY customer_name LIMIT :limit OFFSET :offset
        """
        try:
            result = await db.execute(
                select(Customer)
                .order_by(Customer.customer_name)
                .limit(limit)
                .offset(offset)
            )
            customers: List[Customer] = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise _translate(e, "list")

        logger.debug("Listed %d customers (limit=%d, offset=%d)", len(customers), limit, offset)
        return CustomerListResponse(data=[_to_item(c) for c in customers])

    async def _fetch(self, db: AsyncSession, customer_id: uuid.UUID) -> Customer:
        try:
            result = await db.execute(
                select(Customer).where(Customer.customer_id == customer_id)
            )
            customer = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _translate(e, "select")

        if customer is None:
            raise NotFoundError(resource="customer", resource_id=str(customer_id))
        return customer

    async def get_customer(self, db: AsyncSession, raw_id: str) -> SingleCustomerResponse:
        """SELECT * FROM customer WHERE customer_id = :id"""
        customer_id = parse_customer_id(raw_id)
        return _to_single(await self._fetch(db, customer_id))

    async def update_customer(
        self, db: AsyncSession, raw_id: str, body: CreateCustomerSchema
    ) -> SingleCustomerResponse:
        """
        Overwrite both name fields of an existing customer.

        The row is read first so a missing id reports NOT_FOUND rather than
        an empty UPDATE.
        """
        customer_id = parse_customer_id(raw_id)
        customer = await self._fetch(db, customer_id)

        customer.customer_name = body.customer_name
        customer.customer_surname = body.customer_surname
        try:
            # UPDATE customer SET customer_name=:name, customer_surname=:surname WHERE customer_id=:id
            await db.flush()
        except SQLAlchemyError as e:
            raise _translate(e, "update")

        logger.info("Customer updated: %s", customer_id)
        return _to_single(customer)

    async def delete_customer(self, db: AsyncSession, raw_id: str) -> SingleCustomerResponse:
        """
        Delete a customer and echo back the fields it had.
        """
        customer_id = parse_customer_id(raw_id)
        customer = await self._fetch(db, customer_id)
        response = _to_single(customer, status="deleted")

        try:
            await db.execute(
                delete(Customer).where(Customer.customer_id == customer_id)
            )
        except SQLAlchemyError as e:
            raise _translate(e, "delete")

        logger.info("Customer deleted: %s", customer_id)
        return response


customer_service = CustomerService()
