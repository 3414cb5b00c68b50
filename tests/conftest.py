"""
DualStore — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Lets service tests run against mocks and API tests run against real
       SQLAlchemy on in-memory SQLite, with no PostgreSQL or MongoDB server.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:     AsyncMock standing in for AsyncSession
    ├── mock_collection:     AsyncMock standing in for the order collection
    ├── db_session_factory:  async_sessionmaker bound to in-memory aiosqlite, schema created
    ├── order_collection:    InMemoryOrderCollection (dict-backed collection double)
    └── test_client:         HTTPX AsyncClient with both store dependencies overridden
"""

import os
from types import SimpleNamespace
from typing import Any, AsyncIterator, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Before any dualstore import: settings are read at import time
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("CONFIG_DIRECTORY", None)


async def aiter_docs(docs: List[Dict[str, Any]]) -> AsyncIterator[Dict[str, Any]]:
    """Async iterator over copies of docs; stands in for a PyMongo cursor."""
    for doc in docs:
        yield dict(doc)


class InMemoryOrderCollection:
    """
    Dict-backed double for the subset of AsyncCollection the order service uses.

    Keeps insertion order, like MongoDB's natural order on a fresh collection.
    """

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}

    async def insert_one(self, document: Dict[str, Any]):
        doc = dict(document)
        doc.setdefault("_id", ObjectId())
        self.documents[doc["_id"]] = doc
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    async def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self.documents.get(filter.get("_id"))
        return dict(doc) if doc is not None else None

    def find(self, filter: Optional[Dict[str, Any]] = None, skip: int = 0, limit: int = 0):
        docs = list(self.documents.values())[skip:]
        if limit:
            docs = docs[:limit]
        return aiter_docs(docs)

    async def find_one_and_update(
        self,
        filter: Dict[str, Any],
        update: Dict[str, Any],
        return_document: bool = ReturnDocument.BEFORE,
    ) -> Optional[Dict[str, Any]]:
        doc = self.documents.get(filter.get("_id"))
        if doc is None:
            return None
        before = dict(doc)
        doc.update(update["$set"])
        return dict(doc) if return_document == ReturnDocument.AFTER else before

    async def delete_one(self, filter: Dict[str, Any]):
        removed = self.documents.pop(filter.get("_id"), None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1, acknowledged=True)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = customer
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_collection():
    """AsyncMock collection; `find` is synchronous in PyMongo, so it is a MagicMock."""
    collection = AsyncMock()
    collection.find = MagicMock()
    return collection


@pytest.fixture
def sample_order_doc():
    return {"_id": ObjectId(), "customer_name": "paul", "product_name": "banana"}


# ══════════════════════════════════════════════════════════════════════════
# API-test stores
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_session_factory():
    """
    In-memory SQLite with the customer schema created from the ORM metadata.

    StaticPool keeps the single in-memory connection alive across sessions.
    """
    from dualstore.database import Base
    from dualstore.models.customer import Customer  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def order_collection():
    return InMemoryOrderCollection()


@pytest_asyncio.fixture
async def test_client(db_session_factory, order_collection):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    get_db_session and get_order_collection are overridden, so no real store
    is contacted. The lifespan is not run by ASGITransport.
    """
    from dualstore.database import get_db_session
    from dualstore.main import app
    from dualstore.mongo import get_order_collection

    async def override_db_session():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_order_collection] = lambda: order_collection

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
