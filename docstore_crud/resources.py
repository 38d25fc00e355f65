"""
DocStore CRUD — Resource Registry
==================================

What:  Describes each CRUD resource: URL path, storage binding, and schemas.
How:   A Resource is a frozen descriptor; `build_resources()` creates one per
       known resource from settings, and main.py mounts a router for each
       enabled one.
Who:   Consumed by the router factory (routes/crud.py) and DocumentService.

    name        path        database   collection   request body      response
    ─────────── ─────────── ────────── ──────────── ───────────────── ─────────────────
    user        /user       users      users        UserCreate        UserResponse
    employee    /employee   hrms       employees    EmployeeCreate    EmployeeResponse
"""

from dataclasses import dataclass
from typing import Dict, List, Type

from pydantic import BaseModel

from docstore_crud.config import Settings
from docstore_crud.schemas.employee import EmployeeCreate, EmployeeResponse
from docstore_crud.schemas.user import UserCreate, UserResponse


@dataclass(frozen=True)
class Resource:
    """One entity shape bound to one collection and one URL path."""

    name: str
    database: str
    collection: str
    create_schema: Type[BaseModel]
    response_schema: Type[BaseModel]
    tag: str

    @property
    def path(self) -> str:
        return f"/{self.name}"

    @property
    def field_names(self) -> List[str]:
        """Non-identifier fields, in declaration order; these are what $set overwrites."""
        return list(self.create_schema.model_fields)


def build_resources(config: Settings) -> Dict[str, Resource]:
    """All known resources keyed by name, with storage bindings read from settings."""
    return {
        "user": Resource(
            name="user",
            database=config.user_database,
            collection=config.user_collection,
            create_schema=UserCreate,
            response_schema=UserResponse,
            tag="Users",
        ),
        "employee": Resource(
            name="employee",
            database=config.employee_database,
            collection=config.employee_collection,
            create_schema=EmployeeCreate,
            response_schema=EmployeeResponse,
            tag="Employees",
        ),
    }


def enabled_resources(config: Settings) -> List[Resource]:
    """The resources this process should serve, in ENABLED_RESOURCES order."""
    registry = build_resources(config)
    return [registry[name] for name in config.enabled_resources_list]
