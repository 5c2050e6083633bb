"""
Student repository for UniPlace.

Read accessor for student profiles plus the student's own profile edits.
"""

from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument

from uniplace.data.database import STUDENTS
from uniplace.data.models.base import utc_now
from uniplace.data.models.student import Student, StudentUpdate
from uniplace.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class StudentRepository(BaseRepository[Student]):
    """Repository for student profile operations."""

    @property
    def collection_name(self) -> str:
        return STUDENTS

    @property
    def model_class(self) -> type[Student]:
        return Student

    def update_profile(
        self, student_id: str | ObjectId, update: StudentUpdate
    ) -> Optional[Student]:
        """
        Apply a student's profile edit and return the updated profile.

        Only the fields set on `update` change. Returns None when the
        student does not exist.
        """
        query = self._id_query(student_id)
        if query is None:
            return None

        changes = update.model_dump(exclude_unset=True)
        changes["updated_at"] = utc_now()
        document = self._get_collection().find_one_and_update(
            query, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        if document is not None:
            logger.info(f"Updated student profile {student_id}: {sorted(changes)}")
        return self._to_model(document)


# Singleton instance
_student_repository: Optional[StudentRepository] = None


def get_student_repository() -> StudentRepository:
    """Get the student repository singleton instance."""
    global _student_repository
    if _student_repository is None:
        _student_repository = StudentRepository()
    return _student_repository
