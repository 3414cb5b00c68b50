"""Tests for the per-request session dependency (commit / rollback / close)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from dualstore.database import get_db_session
from dualstore.exceptions import DatabaseError, ErrorKind


def factory_for(session):
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory


class TestGetDbSession:

    @pytest.mark.asyncio
    async def test_commits_on_success(self, mock_db_session):
        with patch("dualstore.database.async_session_factory", factory_for(mock_db_session)):
            gen = get_db_session()
            assert await gen.__anext__() is mock_db_session
            with pytest.raises(StopAsyncIteration):
                await gen.__anext__()

        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()
        mock_db_session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_connection_failure_is_database_error(self, mock_db_session):
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("server closed the connection"))
        )
        with patch("dualstore.database.async_session_factory", factory_for(mock_db_session)):
            gen = get_db_session()
            await gen.__anext__()
            with pytest.raises(DatabaseError) as exc_info:
                await gen.__anext__()

        assert exc_info.value.kind is ErrorKind.CONNECTION
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_constraint_failure_is_query_error(self, mock_db_session):
        mock_db_session.commit = AsyncMock(
            side_effect=IntegrityError("COMMIT", {}, Exception("deferred constraint"))
        )
        with patch("dualstore.database.async_session_factory", factory_for(mock_db_session)):
            gen = get_db_session()
            await gen.__anext__()
            with pytest.raises(DatabaseError) as exc_info:
                await gen.__anext__()

        assert exc_info.value.kind is ErrorKind.QUERY

    @pytest.mark.asyncio
    async def test_handler_error_rolls_back_and_propagates(self, mock_db_session):
        with patch("dualstore.database.async_session_factory", factory_for(mock_db_session)):
            gen = get_db_session()
            await gen.__anext__()
            with pytest.raises(RuntimeError):
                await gen.athrow(RuntimeError("handler failed"))

        mock_db_session.commit.assert_not_awaited()
        mock_db_session.rollback.assert_awaited_once()
