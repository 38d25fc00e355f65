"""
DocStore CRUD — Document Service
=================================

What:  Performs the single store operation behind each CRUD handler and
       translates driver outcomes into application exceptions.
How:   Wraps one AsyncCollection plus the Resource describing its shape.
       Returns response models; raises DocStoreError subclasses.
Who:   Constructed per request by the generic CRUD router.

Operation map:
    create   → insert_one + find_one(_id)        InsertFailedError / NotFoundError / DatabaseError
    list_all → find({})                           DatabaseError
    update   → find_one_and_update(_id, $set)    InvalidIdentifierError / NotFoundError / DatabaseError
    delete   → find_one_and_delete(_id)          InvalidIdentifierError / NotFoundError / DatabaseError

No retries: every PyMongoError surfaces immediately as one of the above.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from docstore_crud.exceptions import (
    DatabaseError,
    InsertFailedError,
    InvalidIdentifierError,
    NotFoundError,
)
from docstore_crud.resources import Resource

logger = logging.getLogger(__name__)


def parse_object_id(identifier: str) -> ObjectId:
    """
    Convert a path identifier into an ObjectId.

    Only the 24-hex-character form is accepted.

    Raises:
        InvalidIdentifierError: identifier is not a valid ObjectId (→ 400)
    """
    try:
        return ObjectId(identifier)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError(identifier)


class DocumentService:
    """
    CRUD operations over a single collection.

    Args:
        collection:       Collection handle bound to the resource's database
        resource:         Descriptor supplying schemas and the resource name
        return_updated:   update() returns the post-$set document when True,
                          the pre-$set document when False
    """

    def __init__(
        self,
        collection: AsyncCollection,
        resource: Resource,
        return_updated: bool = True,
    ):
        self.collection = collection
        self.resource = resource
        self.return_updated = return_updated

    # ── Helpers ───────────────────────────────────────────────────────────

    def _to_response(
        self, document: Mapping[str, Any], identifier: Optional[str] = None
    ) -> BaseModel:
        """
        Map a stored document onto the response schema.

        `_id` becomes the string `id`; when `identifier` is given it wins,
        so PUT/DELETE echo exactly the id the client sent.
        """
        data: Dict[str, Any] = dict(document)
        object_id = data.pop("_id", None)
        data["id"] = identifier if identifier is not None else str(object_id)
        return self.resource.response_schema.model_validate(data)

    def _storage_error(self, operation: str, exc: PyMongoError, **context: Any) -> DatabaseError:
        logger.error(
            "MongoDB %s on %s.%s failed: %s",
            operation,
            self.resource.database,
            self.resource.collection,
            exc,
        )
        return DatabaseError(
            context={
                "operation": operation,
                "resource": self.resource.name,
                "error_type": type(exc).__name__,
                "detail": str(exc),
                **context,
            },
        )

    # ── Operations ────────────────────────────────────────────────────────

    async def create(self, payload: BaseModel) -> BaseModel:
        """
        Insert a new record and return it as stored.

        The request schema has no identifier field, so the inserted document
        never carries a client-chosen `_id`; the driver assigns a fresh one.

        Raises:
            InsertFailedError: storage rejected the insert (→ 400)
            NotFoundError:     refetch by the new _id found nothing (→ 404)
            DatabaseError:     refetch failed for another reason (→ 500)
        """
        document = payload.model_dump()

        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            logger.warning("Insert into %s rejected: %s", self.resource.collection, e)
            raise InsertFailedError(
                resource=self.resource.name,
                context={"error_type": type(e).__name__, "detail": str(e)},
            )

        inserted_id = result.inserted_id
        try:
            created = await self.collection.find_one({"_id": inserted_id})
        except PyMongoError as e:
            raise self._storage_error("find_one", e, resource_id=str(inserted_id))

        if created is None:
            raise NotFoundError(resource=self.resource.name, resource_id=str(inserted_id))

        logger.info("Created %s %s", self.resource.name, inserted_id)
        return self._to_response(created)

    async def list_all(self) -> List[BaseModel]:
        """
        Every record in the collection, in storage's natural order.

        No filter, no sort, no pagination. An empty collection yields [].
        """
        try:
            documents = await self.collection.find({}).to_list()
        except PyMongoError as e:
            raise self._storage_error("find", e)

        return [self._to_response(document) for document in documents]

    async def update(self, identifier: str, payload: BaseModel) -> BaseModel:
        """
        Overwrite every non-identifier field of the matching record.

        The identifier comes from the path only; the returned document's id is
        replaced with that same string.

        Raises:
            InvalidIdentifierError: identifier is not an ObjectId (→ 400)
            NotFoundError:          no record has that identifier (→ 404)
            DatabaseError:          any other storage failure (→ 500)
        """
        object_id = parse_object_id(identifier)
        fields = payload.model_dump(include=set(self.resource.field_names))

        return_document = ReturnDocument.AFTER if self.return_updated else ReturnDocument.BEFORE
        try:
            document = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": fields},
                return_document=return_document,
            )
        except PyMongoError as e:
            raise self._storage_error("find_one_and_update", e, resource_id=identifier)

        if document is None:
            raise NotFoundError(resource=self.resource.name, resource_id=identifier)

        logger.info("Updated %s %s", self.resource.name, identifier)
        return self._to_response(document, identifier=identifier)

    async def delete(self, identifier: str) -> BaseModel:
        """
        Atomically remove the matching record and return it as it was.

        Raises:
            InvalidIdentifierError: identifier is not an ObjectId (→ 400)
            NotFoundError:          no record has that identifier (→ 404)
            DatabaseError:          any other storage failure (→ 500)
        """
        object_id = parse_object_id(identifier)

        try:
            document = await self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            raise self._storage_error("find_one_and_delete", e, resource_id=identifier)

        if document is None:
            raise NotFoundError(resource=self.resource.name, resource_id=identifier)

        logger.info("Deleted %s %s", self.resource.name, identifier)
        return self._to_response(document, identifier=identifier)
