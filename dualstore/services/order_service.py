"""
DualStore — Order Service (MongoDB adapter)
=============================================

What:  CRUD operations over the order collection.
Why:   Keeps document operations and driver error translation out of the routes.
How:   Each method performs one collection operation (create also reads the new
       document back) and parses the resulting documents through OrderDocument.
Who:   Called by routes/orders.py with the collection injected per request.

Error Translation:
    malformed ObjectId                        → InvalidIdentifierError (INVALID_ID)
    no matching document                      → NotFoundError (NOT_FOUND)
    ConnectionFailure (incl. selection timeout) → DatabaseError(CONNECTION)
    ConfigurationError                        → DatabaseError(PARSING)
    bson InvalidDocument / malformed document → DatabaseError(SERIALIZATION)
    any other PyMongoError (incl. duplicate key) → DatabaseError(QUERY)
"""

import logging
from typing import Any, List

from bson import ObjectId
from bson.errors import InvalidDocument, InvalidId
from pydantic import ValidationError as PydanticValidationError
from pymongo import ReturnDocument
from pymongo.errors import ConfigurationError, ConnectionFailure, PyMongoError

from dualstore.exceptions import (
    DatabaseError,
    ErrorKind,
    InvalidIdentifierError,
    NotFoundError,
)
from dualstore.models.order import OrderDocument
from dualstore.mongo import Document
from dualstore.schemas.order import (
    CreateOrderSchema,
    DeleteOrderResponse,
    OrderData,
    OrderListResponse,
    OrderResponse,
    SingleOrderResponse,
)

logger = logging.getLogger(__name__)


def parse_object_id(raw_id: str) -> ObjectId:
    """Parse a path id into an ObjectId, raising InvalidIdentifierError on garbage."""
    try:
        return ObjectId(raw_id)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError(resource="order", raw_id=str(raw_id))


def _translate(e: Exception, operation: str) -> DatabaseError:
    if isinstance(e, ConnectionFailure):
        kind = ErrorKind.CONNECTION
    elif isinstance(e, ConfigurationError):
        kind = ErrorKind.PARSING
    elif isinstance(e, InvalidDocument):
        kind = ErrorKind.SERIALIZATION
    else:
        kind = ErrorKind.QUERY
    logger.error("Order %s failed: %s", operation, str(e))
    return DatabaseError(
        message=f"Order {operation} failed",
        kind=kind,
        context={"operation": operation, "error_type": type(e).__name__, "error": str(e)},
    )


def doc_to_order(doc: Document) -> OrderResponse:
    """Project a stored document onto the response model."""
    try:
        order = OrderDocument.model_validate(doc)
    except PydanticValidationError as e:
        logger.error("Malformed order document %s: %s", doc.get("_id"), str(e))
        raise DatabaseError(
            message="Stored order document is malformed",
            kind=ErrorKind.SERIALIZATION,
            context={"document_id": str(doc.get("_id"))},
        )
    return OrderResponse(
        id=order.id,
        customer_name=order.customer_name,
        product_name=order.product_name,
    )


def _single(doc: Document) -> SingleOrderResponse:
    return SingleOrderResponse(data=OrderData(order=doc_to_order(doc)))


class OrderService:
    """Stateless service; the collection is passed in per call."""

    async def create_order(self, collection: Any, body: CreateOrderSchema) -> SingleOrderResponse:
        """
        Insert a new order, then read it back by the generated _id.

        Reading back returns exactly what MongoDB stored rather than echoing the input.
        """
        document = {"customer_name": body.customer_name, "product_name": body.product_name}
        try:
            result = await collection.insert_one(document)
            stored = await collection.find_one({"_id": result.inserted_id})
        except (PyMongoError, InvalidDocument) as e:
            raise _translate(e, "insert")

        if stored is None:
            # Inserted but not readable: replica lag or a concurrent delete
            raise DatabaseError(
                message="Inserted order could not be read back",
                context={"order_id": str(result.inserted_id)},
            )

        logger.info("Order created: %s", result.inserted_id)
        return _single(stored)

    async def fetch_orders(self, collection: Any, limit: int = 10, page: int = 1) -> OrderListResponse:
        """One page of orders in natural order, skipping (page - 1) * limit documents."""
        skip = (page - 1) * limit
        if skip < 0:
            raise DatabaseError(
                message="Negative skip computed from pagination parameters",
                kind=ErrorKind.PARSING,
                context={"page": page, "limit": limit},
            )

        orders: List[OrderResponse] = []
        try:
            cursor = collection.find({}, skip=skip, limit=limit)
            async for doc in cursor:
                orders.append(doc_to_order(doc))
        except (PyMongoError, InvalidDocument) as e:
            raise _translate(e, "list")

        logger.debug("Listed %d orders (limit=%d, page=%d)", len(orders), limit, page)
        return OrderListResponse(results=len(orders), orders=orders)

    async def get_order(self, collection: Any, raw_id: str) -> SingleOrderResponse:
        oid = parse_object_id(raw_id)
        try:
            doc = await collection.find_one({"_id": oid})
        except (PyMongoError, InvalidDocument) as e:
            raise _translate(e, "find")

        if doc is None:
            raise NotFoundError(resource="order", resource_id=raw_id)
        return _single(doc)

    async def edit_order(
        self, collection: Any, raw_id: str, body: CreateOrderSchema
    ) -> SingleOrderResponse:
        """$set the body fields and return the document as it is after the update."""
        oid = parse_object_id(raw_id)
        update = {"$set": body.model_dump()}
        try:
            doc = await collection.find_one_and_update(
                {"_id": oid},
                update,
                return_document=ReturnDocument.AFTER,
            )
        except (PyMongoError, InvalidDocument) as e:
            raise _translate(e, "update")

        if doc is None:
            raise NotFoundError(resource="order", resource_id=raw_id)

        logger.info("Order updated: %s", raw_id)
        return _single(doc)

    async def delete_order(self, collection: Any, raw_id: str) -> DeleteOrderResponse:
        oid = parse_object_id(raw_id)
        try:
            result = await collection.delete_one({"_id": oid})
        except (PyMongoError, InvalidDocument) as e:
            raise _translate(e, "delete")

        if result.deleted_count == 0:
            raise NotFoundError(resource="order", resource_id=raw_id)

        logger.info("Order deleted: %s", raw_id)
        return DeleteOrderResponse(id=raw_id)


order_service = OrderService()
