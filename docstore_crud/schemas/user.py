"""
DocStore CRUD — User Schemas
=============================

What:  Request and response shapes for the /user resource.
Who:   Bound to the "user" Resource in resources.py; used by the generic CRUD router.

Stored documents carry `_id` (ObjectId); responses expose it as the string `id`.
The request body has no `id` field at all, so a client-supplied identifier is
dropped while decoding and can never reach an insert or a $set.
"""

from pydantic import BaseModel, ConfigDict, Field

# BSON stores integers as signed 64-bit values
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class UserCreate(BaseModel):
    """
    Body for POST /user and PUT /user/{id}.

    Missing fields decode to their zero value; unknown fields (including
    `id`) are ignored. Decoding is strict: a wrong JSON type such as
    "age": "30" or "age": true is a 400, never coerced.
    """
    model_config = ConfigDict(strict=True)

    name: str = Field(default="", description="Full name")
    gender: str = Field(default="", description="Free-form gender label")
    age: int = Field(default=0, ge=INT64_MIN, le=INT64_MAX, description="Age in whole years")


class UserResponse(BaseModel):
    """A stored user as returned by every /user endpoint."""
    id: str = Field(description="Server-assigned identifier (24 hex characters)")
    name: str = ""
    gender: str = ""
    age: int = 0
