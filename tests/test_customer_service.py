"""
DualStore — Customer Service Unit Tests
=========================================

What:  Tests for CustomerService (create, list, get, update, delete).
How:   Uses the mock DB session; no database is contacted.

What we test:
    ✅ Create adds a row with a generated UUID and flushes
    ✅ Missing rows raise NotFoundError, malformed ids raise InvalidIdentifierError
    ✅ Update overwrites both fields, delete echoes pre-delete fields
    ✅ SQLAlchemy failures are translated to CONNECTION / QUERY kinds
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from dualstore.exceptions import (
    DatabaseError,
    ErrorKind,
    InvalidIdentifierError,
    NotFoundError,
)
from dualstore.schemas.customer import CreateCustomerSchema
from dualstore.services.customer_service import CustomerService, parse_customer_id


def make_customer(name="Blanche", surname="Jarvis"):
    customer = MagicMock()
    customer.customer_id = uuid.uuid4()
    customer.customer_name = name
    customer.customer_surname = surname
    return customer


def found(customer):
    result = MagicMock()
    result.scalar_one_or_none.return_value = customer
    return result


class TestParseCustomerId:

    def test_valid_uuid(self):
        raw = "0b7c2f4e-8a1d-4d55-9d6a-2f7f3a1c9e10"
        assert parse_customer_id(raw) == uuid.UUID(raw)

    def test_garbage_raises_invalid_id(self):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            parse_customer_id("paul")
        assert exc_info.value.kind is ErrorKind.INVALID_ID


class TestCustomerServiceCreate:

    def setup_method(self):
        self.service = CustomerService()

    @pytest.mark.asyncio
    async def test_create_customer_success(self, mock_db_session):
        body = CreateCustomerSchema(customer_name="paul", customer_surname="doe")

        result = await self.service.create_customer(mock_db_session, body)

        assert result.status == "success"
        assert result.name == "paul"
        assert result.surname == "doe"
        uuid.UUID(result.id)
        mock_db_session.add.assert_called_once()
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_customer_connection_failure(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("connection refused"))
        )
        body = CreateCustomerSchema(customer_name="paul", customer_surname="doe")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_customer(mock_db_session, body)
        assert exc_info.value.kind is ErrorKind.CONNECTION

    @pytest.mark.asyncio
    async def test_create_customer_query_failure(self, mock_db_session):
        mock_db_session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
        )
        body = CreateCustomerSchema(customer_name="paul", customer_surname="doe")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_customer(mock_db_session, body)
        assert exc_info.value.kind is ErrorKind.QUERY


class TestCustomerServiceRead:

    def setup_method(self):
        self.service = CustomerService()

    @pytest.mark.asyncio
    async def test_get_customer_found(self, mock_db_session):
        customer = make_customer()
        mock_db_session.execute.return_value = found(customer)

        result = await self.service.get_customer(mock_db_session, str(customer.customer_id))

        assert result.id == str(customer.customer_id)
        assert result.name == "Blanche"
        assert result.surname == "Jarvis"
        assert result.status == "success"

    @pytest.mark.asyncio
    async def test_get_customer_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = found(None)

        with pytest.raises(NotFoundError):
            await self.service.get_customer(mock_db_session, str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_get_customer_invalid_id_skips_query(self, mock_db_session):
        with pytest.raises(InvalidIdentifierError):
            await self.service.get_customer(mock_db_session, "not-a-uuid")
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_null_columns_render_as_empty_strings(self, mock_db_session):
        customer = make_customer(name=None, surname=None)
        mock_db_session.execute.return_value = found(customer)

        result = await self.service.get_customer(mock_db_session, str(customer.customer_id))

        assert result.name == ""
        assert result.surname == ""

    @pytest.mark.asyncio
    async def test_list_customers(self, mock_db_session):
        customers = [make_customer("Hattie", "Rodgers"), make_customer("Polly", "Shepard")]
        result_proxy = MagicMock()
        result_proxy.scalars.return_value.all.return_value = customers
        mock_db_session.execute.return_value = result_proxy

        result = await self.service.list_customers(mock_db_session, limit=10, offset=0)

        assert result.status == "success"
        assert [c.name for c in result.data] == ["Hattie", "Polly"]

    @pytest.mark.asyncio
    async def test_list_customers_empty(self, mock_db_session):
        result_proxy = MagicMock()
        result_proxy.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = result_proxy

        result = await self.service.list_customers(mock_db_session)

        assert result.data == []


class TestCustomerServiceWrite:

    def setup_method(self):
        self.service = CustomerService()

    @pytest.mark.asyncio
    async def test_update_customer_overwrites_fields(self, mock_db_session):
        customer = make_customer("Polly", "Shepard")
        mock_db_session.execute.return_value = found(customer)
        body = CreateCustomerSchema(customer_name="Hattie", customer_surname="Rodgers")

        result = await self.service.update_customer(
            mock_db_session, str(customer.customer_id), body
        )

        assert customer.customer_name == "Hattie"
        assert customer.customer_surname == "Rodgers"
        assert result.name == "Hattie"
        assert result.status == "success"
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_missing_customer(self, mock_db_session):
        mock_db_session.execute.return_value = found(None)
        body = CreateCustomerSchema(customer_name="Hattie", customer_surname="Rodgers")

        with pytest.raises(NotFoundError):
            await self.service.update_customer(mock_db_session, str(uuid.uuid4()), body)
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_customer_echoes_fields(self, mock_db_session):
        customer = make_customer("Polly", "Shepard")
        mock_db_session.execute = AsyncMock(side_effect=[found(customer), MagicMock()])

        result = await self.service.delete_customer(mock_db_session, str(customer.customer_id))

        assert result.status == "deleted"
        assert result.id == str(customer.customer_id)
        assert result.name == "Polly"
        assert mock_db_session.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_delete_missing_customer(self, mock_db_session):
        mock_db_session.execute.return_value = found(None)

        with pytest.raises(NotFoundError):
            await self.service.delete_customer(mock_db_session, str(uuid.uuid4()))
        assert mock_db_session.execute.await_count == 1
