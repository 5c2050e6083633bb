"""
Shared plumbing for the UniPlace repositories.

A repository owns one collection and converts between its raw documents
and the matching `BaseDocument` model. Ids arrive from callers as strings
or ObjectIds; a malformed id simply matches nothing.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.database import Database

from uniplace.data.database import get_database_manager
from uniplace.data.models.base import BaseDocument, parse_object_id, utc_now
from uniplace.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseDocument)


class BaseRepository(ABC, Generic[T]):
    """
    One collection, one model.

    Pass `database` to bind the repository to a specific database handle;
    otherwise the configured connection is used.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        pass

    def __init__(self, database: Optional[Database] = None) -> None:
        self._database = database

    def _get_collection(self) -> Collection:
        if self._database is not None:
            return self._database[self.collection_name]
        return get_database_manager().get_sync_collection(self.collection_name)

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        return [self.model_class.model_validate(doc) for doc in documents]

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> ObjectId:
        return parse_object_id(id_value)

    @staticmethod
    def _id_query(id_value: str | ObjectId) -> Optional[dict[str, Any]]:
        """`_id` filter for the value, or None when it is not a valid ObjectId."""
        try:
            return {"_id": parse_object_id(id_value)}
        except ValueError:
            return None

    def create(self, model: T) -> T:
        """Insert a new record, stamping both timestamps and the assigned id."""
        now = utc_now()
        model.created_at = now
        model.updated_at = now

        result = self._get_collection().insert_one(model.model_dump_mongo())
        model.id = result.inserted_id
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    def get_by_id(self, id_value: str | ObjectId) -> Optional[T]:
        query = self._id_query(id_value)
        if query is None:
            return None
        return self._to_model(self._get_collection().find_one(query))

    def find(
        self,
        query: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        sort_by: str = "created_at",
    ) -> list[T]:
        """Matching records, newest first by `sort_by`."""
        cursor = self._get_collection().find(query).sort(sort_by, -1).skip(skip).limit(limit)
        return self._to_models(list(cursor))

    def find_one(self, query: dict[str, Any]) -> Optional[T]:
        return self._to_model(self._get_collection().find_one(query))

    def count(self, query: dict[str, Any]) -> int:
        return self._get_collection().count_documents(query)
