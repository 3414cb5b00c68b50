"""
DualStore — Order Document Model
==================================

What:  Typed view of a document in the order collection.
Why:   MongoDB hands back plain dicts with a BSON ObjectId under `_id`; parsing them
       through one model catches malformed documents in a single place and gives the
       service a stable attribute interface.
How:   Pydantic model with `_id` aliased to `id` and the ObjectId rendered as its
       24-character hex string.

Document shape:
    {"_id": ObjectId("65f1..."), "customer_name": "paul", "product_name": "banana"}
"""

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderDocument(BaseModel):
    """A stored order as read back from MongoDB."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    customer_name: str
    product_name: str

    @field_validator("id", mode="before")
    @classmethod
    def object_id_to_hex(cls, v: Any) -> str:
        if isinstance(v, ObjectId):
            return str(v)
        if isinstance(v, str) and ObjectId.is_valid(v):
            return v
        raise ValueError(f"'{v}' is not an ObjectId")
