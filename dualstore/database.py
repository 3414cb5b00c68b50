"""
DualStore — PostgreSQL Session Management
===========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency for the
       customer store.
Why:   Centralizes all relational connection logic in one place.
How:   Creates an async engine (asyncpg driver) with connection pooling, provides a
       session dependency that commits on success and rolls back on error.
Who:   Used by the customer routes via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    pool_size / max_overflow come from settings (DB_POOL_SIZE, DB_MAX_OVERFLOW).
    pool_pre_ping validates a connection before handing it out, so a restarted
    PostgreSQL does not surface as a failed request.
    Creating the engine does not connect; the first checkout does.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from dualstore.config import settings
from dualstore.exceptions import DatabaseError, ErrorKind

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.sqlalchemy_database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=settings.db_pool_pre_ping,
    pool_recycle=3600,
    echo=settings.log_level == "DEBUG",
)

# expire_on_commit=False: response models are built from ORM objects after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object; Alembic reads it for --autogenerate.
    """
    pass


def translate_error(e: SQLAlchemyError, operation: str, resource: str = "PostgreSQL") -> DatabaseError:
    """
    Map a SQLAlchemy exception onto a DatabaseError kind.

        OperationalError / InterfaceError   → CONNECTION
        any other SQLAlchemyError           → QUERY
    """
    kind = ErrorKind.CONNECTION if isinstance(e, (OperationalError, InterfaceError)) else ErrorKind.QUERY
    logger.error("%s %s failed: %s", resource, operation, str(e))
    return DatabaseError(
        message=f"{resource} {operation} failed",
        kind=kind,
        context={"operation": operation, "error_type": type(e).__name__, "error": str(e)},
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises for the global error handler.
           A SQLAlchemy error (e.g. the commit itself failing) is translated
           into DatabaseError first, so it renders as 400 DATABASE_ERROR.
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/api/pg/{customer_id}")
        async def get_customer(customer_id: str, db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise translate_error(e, "commit") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool (application shutdown)."""
    await engine.dispose()
