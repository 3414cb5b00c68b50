"""
DualStore — Order Request/Response Schemas
============================================

What:  Pydantic models defining the /api/mongo contract.

Response shapes:
    single:  {"status": "success", "data": {"order": {"id", "customer_name", "product_name"}}}
    list:    {"status": "success", "results": 2, "orders": [...]}
    delete:  {"status": "deleted", "id": "..."}
"""

from typing import List

from pydantic import BaseModel, Field


class CreateOrderSchema(BaseModel):
    """Body of POST /api/mongo and PATCH /api/mongo/{id}."""

    customer_name: str = Field(description="Who placed the order")
    product_name: str = Field(description="What was ordered")


class OrderResponse(BaseModel):
    id: str = Field(description="ObjectId as 24-character hex")
    customer_name: str
    product_name: str


class OrderData(BaseModel):
    order: OrderResponse


class SingleOrderResponse(BaseModel):
    """Returned by create, get and update."""

    status: str = Field(default="success")
    data: OrderData


class OrderListResponse(BaseModel):
    """Returned by GET /api/mongo; `results` is the length of this page."""

    status: str = Field(default="success")
    results: int
    orders: List[OrderResponse]


class DeleteOrderResponse(BaseModel):
    status: str = Field(default="deleted")
    id: str
