"""
DocStore CRUD — Generic CRUD Route Factory
===========================================

What:  Builds the four CRUD endpoints for any Resource.
How:   `build_crud_router(resource)` closes over the resource's schemas and
       storage binding and returns an APIRouter mounted at /{resource}.
       Handlers stay thin: decode, call DocumentService, return the model.
       Errors propagate as DocStoreError and are rendered by main.py.

Routes (per resource):
    POST   /{resource}        → 201 created entity
    GET    /{resource}        → 200 array of entities
    PUT    /{resource}/{id}   → 200 entity with id = path id
    DELETE /{resource}/{id}   → 200 deleted entity with id = path id
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from pymongo import AsyncMongoClient

from docstore_crud.database import get_collection, get_mongo_client
from docstore_crud.resources import Resource
from docstore_crud.schemas.common import ErrorResponse
from docstore_crud.services.document_service import DocumentService


def build_crud_router(resource: Resource) -> APIRouter:
    """
    Create the router serving one resource.

    The request body type is the resource's create schema; FastAPI decodes
    it before the handler runs, so a malformed body never reaches storage.
    """
    create_schema = resource.create_schema
    response_schema = resource.response_schema

    router = APIRouter(prefix=resource.path, tags=[resource.tag])

    def get_service(
        request: Request,
        client: AsyncMongoClient = Depends(get_mongo_client),
    ) -> DocumentService:
        collection = get_collection(client, resource.database, resource.collection)
        return DocumentService(
            collection,
            resource,
            return_updated=request.app.state.settings.return_updated_document,
        )

    @router.post(
        "",
        name=f"create_{resource.name}",
        status_code=status.HTTP_201_CREATED,
        response_model=response_schema,
        responses={
            400: {"description": "Malformed body or insert rejected", "model": ErrorResponse},
            404: {"description": "Created record could not be read back", "model": ErrorResponse},
            500: {"description": "Database error", "model": ErrorResponse},
        },
        summary=f"Create a {resource.name}",
    )
    async def create_document(
        payload: create_schema,
        service: DocumentService = Depends(get_service),
    ):
        """Insert a new record; any `id` in the body is ignored."""
        return await service.create(payload)

    @router.get(
        "",
        name=f"list_{resource.name}",
        response_model=List[response_schema],
        responses={500: {"description": "Database error", "model": ErrorResponse}},
        summary=f"List every {resource.name}",
    )
    async def list_documents(service: DocumentService = Depends(get_service)):
        return await service.list_all()

    @router.put(
        "/{document_id}",
        name=f"update_{resource.name}",
        response_model=response_schema,
        responses={
            400: {"description": "Malformed identifier or body", "model": ErrorResponse},
            404: {"description": "No record with this identifier", "model": ErrorResponse},
            500: {"description": "Database error", "model": ErrorResponse},
        },
        summary=f"Replace the fields of a {resource.name}",
    )
    async def update_document(
        document_id: str,
        payload: create_schema,
        service: DocumentService = Depends(get_service),
    ):
        """
        Overwrite name and the other non-identifier fields of one record.

        The identifier is taken from the path; the response echoes it.
        """
        return await service.update(document_id, payload)

    @router.delete(
        "/{document_id}",
        name=f"delete_{resource.name}",
        response_model=response_schema,
        responses={
            400: {"description": "Malformed identifier", "model": ErrorResponse},
            404: {"description": "No record with this identifier", "model": ErrorResponse},
            500: {"description": "Database error", "model": ErrorResponse},
        },
        summary=f"Delete a {resource.name}",
    )
    async def delete_document(
        document_id: str,
        service: DocumentService = Depends(get_service),
    ):
        return await service.delete(document_id)

    return router
