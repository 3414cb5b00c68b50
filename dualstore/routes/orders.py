"""
DualStore — Order Route Handlers
==================================

What:  /api/mongo endpoints over the MongoDB order collection.
Why 200 on create: existing clients of this API expect 200, not 201, from
       POST /api/mongo; only the customer side returns 201.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pymongo.asynchronous.collection import AsyncCollection

from dualstore.mongo import get_order_collection
from dualstore.schemas.common import ErrorResponse, OrderFilterOptions
from dualstore.schemas.order import (
    CreateOrderSchema,
    DeleteOrderResponse,
    OrderListResponse,
    SingleOrderResponse,
)
from dualstore.services.order_service import order_service

router = APIRouter(prefix="/api/mongo", tags=["Orders"])

_error_responses = {400: {"description": "Invalid input or store failure", "model": ErrorResponse}}


@router.post(
    "",
    response_model=SingleOrderResponse,
    responses=_error_responses,
    summary="Create an order",
)
async def create_order(
    body: CreateOrderSchema,
    collection: AsyncCollection = Depends(get_order_collection),
) -> SingleOrderResponse:
    return await order_service.create_order(collection, body)


@router.get(
    "",
    response_model=OrderListResponse,
    responses=_error_responses,
    summary="List orders",
)
async def list_orders(
    opts: Annotated[OrderFilterOptions, Query()],
    collection: AsyncCollection = Depends(get_order_collection),
) -> OrderListResponse:
    return await order_service.fetch_orders(collection, limit=opts.limit, page=opts.page)


@router.get(
    "/{order_id}",
    response_model=SingleOrderResponse,
    responses=_error_responses,
    summary="Get an order by id",
)
async def get_order(
    order_id: str,
    collection: AsyncCollection = Depends(get_order_collection),
) -> SingleOrderResponse:
    return await order_service.get_order(collection, order_id)


@router.patch(
    "/{order_id}",
    response_model=SingleOrderResponse,
    responses=_error_responses,
    summary="Replace an order's customer and product",
)
async def update_order(
    order_id: str,
    body: CreateOrderSchema,
    collection: AsyncCollection = Depends(get_order_collection),
) -> SingleOrderResponse:
    return await order_service.edit_order(collection, order_id, body)


@router.delete(
    "/{order_id}",
    response_model=DeleteOrderResponse,
    responses=_error_responses,
    summary="Delete an order",
)
async def delete_order(
    order_id: str,
    collection: AsyncCollection = Depends(get_order_collection),
) -> DeleteOrderResponse:
    return await order_service.delete_order(collection, order_id)
