"""
DualStore — MongoDB Client Management
=======================================

What:  Async PyMongo client, order collection accessor, and FastAPI dependency
       for the order store.
Why:   Mirrors database.py for the document side: one pooled client for the
       process, one collection handle per request.
How:   pymongo.AsyncMongoClient keeps its own connection pool; the client is
       created lazily on first use (it must be constructed inside the running
       event loop) and closed in the application lifespan.
Who:   Used by the order routes and the readiness probe.
"""

import logging
from typing import Any, Dict, Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import ConfigurationError

from dualstore.config import settings
from dualstore.exceptions import DatabaseError, ErrorKind

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

_client: Optional[AsyncMongoClient] = None


def get_mongo_client() -> AsyncMongoClient:
    """
    Return the process-wide client, creating it on first call.

    Raises:
        DatabaseError(PARSING): the configured URI or options are invalid
    """
    global _client
    if _client is None:
        try:
            _client = AsyncMongoClient(
                settings.mongodb_uri,
                appname=settings.mongodb_database,
                serverSelectionTimeoutMS=settings.mongo_timeout_ms,
            )
        except (ConfigurationError, ValueError, TypeError) as e:
            raise DatabaseError(
                message="Invalid MongoDB connection settings",
                kind=ErrorKind.PARSING,
                context={"error": str(e)},
            ) from e
        logger.info(
            "MongoDB client created (database=%s, collection=%s)",
            settings.mongodb_database,
            settings.mongodb_order_collection,
        )
    return _client


def get_order_collection() -> AsyncCollection:
    """FastAPI dependency: the order collection handle."""
    client = get_mongo_client()
    return client[settings.mongodb_database][settings.mongodb_order_collection]


async def ping() -> None:
    """Round-trip to the server; raises on failure. Used by the readiness probe."""
    await get_mongo_client().admin.command("ping")


async def close_mongo_client() -> None:
    """Close the client and drop the cached instance (application shutdown)."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
