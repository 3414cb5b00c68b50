"""
DualStore — Shared Schemas
============================

What:  Models shared across the API: pagination query parameters,
       the error envelope, and the health responses.
"""

from pydantic import BaseModel, Field


class CustomerFilterOptions(BaseModel):
    """
    Query parameters of GET /api/pg.

    page is passed straight through as the SQL OFFSET (rows skipped), so
    ?page=3&limit=10 starts at the fourth customer.
    """
    page: int = Field(default=0, ge=0, description="Rows to skip")
    limit: int = Field(default=10, ge=0, description="Items per page")

    @property
    def offset(self) -> int:
        return self.page


class OrderFilterOptions(BaseModel):
    """
    Query parameters of GET /api/mongo.

    page is 1-based; the store skips (page - 1) * limit documents. page=0 gives
    a negative skip, which the order service reports as a PARSING failure.
    """
    page: int = Field(default=1, ge=0, description="1-based page number")
    limit: int = Field(default=10, ge=0, description="Items per page (0 = no limit)")


class ErrorBody(BaseModel):
    type: str = Field(description="Client error tag, e.g. DATABASE_ERROR")


class ErrorResponse(BaseModel):
    """
    Error envelope for every failed request.

    Example:
        {"error": {"type": "DATABASE_ERROR"}}
    """
    error: ErrorBody


class GenericResponse(BaseModel):
    """Liveness response of GET /api/healthchecker."""
    status: str
    message: str


class HealthResponse(BaseModel):
    """Readiness response of GET /health; checks both stores."""
    status: str = Field(description="healthy, degraded or unhealthy")
    version: str
    postgres: str = Field(description="connected or disconnected")
    mongodb: str = Field(description="connected or disconnected")
    uptime_seconds: float
