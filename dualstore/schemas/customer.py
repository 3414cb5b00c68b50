"""
DualStore — Customer Request/Response Schemas
===============================================

What:  Pydantic models defining the /api/pg contract.
Why:   Request bodies are type-checked before any SQL runs; responses are serialized
       from one place so every endpoint returns the same shape.

Response shapes:
    single:  {"status": "success", "id": "...", "name": "...", "surname": "..."}
    list:    {"status": "success", "data": [{"id": "...", "name": "...", "surname": "..."}]}
    delete:  single shape with status "deleted"
"""

from typing import List

from pydantic import BaseModel, Field


class CreateCustomerSchema(BaseModel):
    """Body of POST /api/pg and PATCH /api/pg/{id}."""

    customer_name: str = Field(description="Given name")
    customer_surname: str = Field(description="Family name")


class CustomerResponse(BaseModel):
    """One customer inside a list response."""

    id: str = Field(description="Customer UUID")
    name: str
    surname: str


class SingleCustomerResponse(BaseModel):
    """Returned by create, get, update and delete."""

    status: str = Field(default="success", description="success, or deleted for DELETE")
    id: str
    name: str
    surname: str


class CustomerListResponse(BaseModel):
    """Returned by GET /api/pg."""

    status: str = Field(default="success")
    data: List[CustomerResponse]
