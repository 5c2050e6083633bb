"""
Posting repository for UniPlace.

Provides data access for job postings, including the one-way
Active -> Stopped status change.
"""

from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument

from uniplace.data.database import POSTINGS
from uniplace.data.models.base import utc_now
from uniplace.data.models.posting import Posting, PostingCreate
from uniplace.utils.constants import PostingStatus
from uniplace.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class PostingRepository(BaseRepository[Posting]):
    """Repository for job posting operations."""

    @property
    def collection_name(self) -> str:
        return POSTINGS

    @property
    def model_class(self) -> type[Posting]:
        return Posting

    def create_from_schema(
        self,
        company_id: str | ObjectId,
        company_name: str,
        posting_data: PostingCreate,
    ) -> Posting:
        """Publish a new posting for a company."""
        posting = Posting(
            company_id=self._to_object_id(company_id),
            company_name=company_name,
            **posting_data.model_dump(),
        )
        return self.create(posting)

    def get_active(self, skip: int = 0, limit: int = 100) -> list[Posting]:
        """Get postings still accepting applications, most recent first."""
        return self.find(
            {"status": PostingStatus.ACTIVE.value},
            skip=skip,
            limit=limit,
            sort_by="posted_date",
        )

    def get_by_company(
        self, company_id: str | ObjectId, skip: int = 0, limit: int = 100
    ) -> list[Posting]:
        """Get all postings published by a company."""
        return self.find(
            {"company_id": self._to_object_id(company_id)},
            skip=skip,
            limit=limit,
            sort_by="posted_date",
        )

    def mark_stopped(self, posting_id: str | ObjectId) -> Optional[Posting]:
        """
        Atomically move a posting from Active to Stopped.

        Returns the stopped posting, or None if it was not Active.
        """
        query = self._id_query(posting_id)
        if query is None:
            return None
        query["status"] = PostingStatus.ACTIVE.value

        document = self._get_collection().find_one_and_update(
            query,
            {"$set": {"status": PostingStatus.STOPPED.value, "updated_at": utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        if document is not None:
            logger.info(f"Posting {posting_id} stopped")
        return self._to_model(document)


# Singleton instance
_posting_repository: Optional[PostingRepository] = None


def get_posting_repository() -> PostingRepository:
    """Get the posting repository singleton instance."""
    global _posting_repository
    if _posting_repository is None:
        _posting_repository = PostingRepository()
    return _posting_repository
