"""
DualStore — Customer Route Handlers
=====================================

What:  /api/pg endpoints over the PostgreSQL customer table.
How:   Path ids are taken as raw strings; the service parses them so a malformed
       id reports INVALID_ID through the common error envelope.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dualstore.database import get_db_session
from dualstore.schemas.common import CustomerFilterOptions, ErrorResponse
from dualstore.schemas.customer import (
    CreateCustomerSchema,
    CustomerListResponse,
    SingleCustomerResponse,
)
from dualstore.services.customer_service import customer_service

router = APIRouter(prefix="/api/pg", tags=["Customers"])

_error_responses = {400: {"description": "Invalid input or store failure", "model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=SingleCustomerResponse,
    responses=_error_responses,
    summary="Create a customer",
)
async def create_customer(
    body: CreateCustomerSchema,
    db: AsyncSession = Depends(get_db_session),
) -> SingleCustomerResponse:
    return await customer_service.create_customer(db, body)


@router.get(
    "",
    response_model=CustomerListResponse,
    responses=_error_responses,
    summary="List customers ordered by name",
)
async def list_customers(
    opts: Annotated[CustomerFilterOptions, Query()],
    db: AsyncSession = Depends(get_db_session),
) -> CustomerListResponse:
    return await customer_service.list_customers(db, limit=opts.limit, offset=opts.offset)


@router.get(
    "/{customer_id}",
    response_model=SingleCustomerResponse,
    responses=_error_responses,
    summary="Get a customer by id",
)
async def get_customer(
    customer_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> SingleCustomerResponse:
    return await customer_service.get_customer(db, customer_id)


@router.patch(
    "/{customer_id}",
    response_model=SingleCustomerResponse,
    responses=_error_responses,
    summary="Replace a customer's name and surname",
)
async def update_customer(
    customer_id: str,
    body: CreateCustomerSchema,
    db: AsyncSession = Depends(get_db_session),
) -> SingleCustomerResponse:
    return await customer_service.update_customer(db, customer_id, body)


@router.delete(
    "/{customer_id}",
    response_model=SingleCustomerResponse,
    responses=_error_responses,
    summary="Delete a customer",
)
async def delete_customer(
    customer_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> SingleCustomerResponse:
    return await customer_service.delete_customer(db, customer_id)
