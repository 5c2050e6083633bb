"""
Application repository for UniPlace.

Provides data access for applications. Creation is a conditional insert
keyed on (posting_id, student_id) and backed by a unique index, so
concurrent submissions for the same pair store at most one document.
"""

from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from uniplace.data.database import APPLICATIONS
from uniplace.data.models.application import Application, StatusChange
from uniplace.data.models.base import utc_now
from uniplace.utils.constants import ApplicationStatus
from uniplace.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for application operations."""

    @property
    def collection_name(self) -> str:
        return APPLICATIONS

    @property
    def model_class(self) -> type[Application]:
        return Application

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def insert_if_absent(self, application: Application) -> Optional[Application]:
        """
        Store the application unless one exists for the same pair.

        Returns the stored application, or None when the pair was taken.
        """
        now = utc_now()
        application.created_at = now
        application.updated_at = now
        document = application.model_dump_mongo()
        key = {
            "posting_id": document.pop("posting_id"),
            "student_id": document.pop("student_id"),
        }

        try:
            result = self._get_collection().update_one(
                key, {"$setOnInsert": document}, upsert=True
            )
        except DuplicateKeyError:
            # Lost the race to a concurrent upsert on the unique index
            return None

        if result.upserted_id is None:
            return None

        application.id = result.upserted_id
        logger.debug(f"Created application {result.upserted_id} for {key}")
        return application

    def record_transition(
        self,
        application_id: str | ObjectId,
        change: StatusChange,
    ) -> Optional[Application]:
        """Set the new status and append the change to the history."""
        query = self._id_query(application_id)
        if query is None:
            return None

        updates: dict = {"status": change.to_status, "updated_at": utc_now()}
        if change.feedback is not None:
            updates["feedback"] = change.feedback

        document = self._get_collection().find_one_and_update(
            query,
            {"$set": updates, "$push": {"status_history": change.model_dump()}},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(document)

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def get_by_posting_and_student(
        self,
        posting_id: str | ObjectId,
        student_id: str | ObjectId,
    ) -> Optional[Application]:
        """Get the application a student made to a posting."""
        return self.find_one(
            {
                "posting_id": self._to_object_id(posting_id),
                "student_id": self._to_object_id(student_id),
            }
        )

    def get_by_student(
        self, student_id: str | ObjectId, skip: int = 0, limit: int = 100
    ) -> list[Application]:
        """Get all applications of a student, newest first."""
        return self.find(
            {"student_id": self._to_object_id(student_id)},
            skip=skip,
            limit=limit,
            sort_by="applied_at",
        )

    def get_by_posting(
        self,
        posting_id: str | ObjectId,
        status: Optional[ApplicationStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Application]:
        """Get applicants of a posting, optionally filtered by status."""
        query: dict = {"posting_id": self._to_object_id(posting_id)}
        if status is not None:
            query["status"] = ApplicationStatus(status).value
        return self.find(query, skip=skip, limit=limit, sort_by="applied_at")


# Singleton instance
_application_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Get the application repository singleton instance."""
    global _application_repository
    if _application_repository is None:
        _application_repository = ApplicationRepository()
    return _application_repository
