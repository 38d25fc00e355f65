"""
DocStore CRUD — Employee Schemas
=================================

What:  Request and response shapes for the /employee resource.
Who:   Bound to the "employee" Resource in resources.py.
"""

from pydantic import BaseModel, ConfigDict, Field

from docstore_crud.schemas.user import INT64_MAX, INT64_MIN


class EmployeeCreate(BaseModel):
    """Body for POST /employee and PUT /employee/{id}; `id` is never read from it."""
    # A JSON integer is still accepted for salary; NaN and Infinity are not
    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    name: str = Field(default="", description="Full name")
    salary: float = Field(default=0.0, description="Salary amount")
    age: int = Field(default=0, ge=INT64_MIN, le=INT64_MAX, description="Age in whole years")


class EmployeeResponse(BaseModel):
    id: str = Field(description="Server-assigned identifier (24 hex characters)")
    name: str = ""
    salary: float = 0.0
    age: int = 0
