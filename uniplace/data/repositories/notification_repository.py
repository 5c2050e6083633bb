"""
Notification repository for UniPlace.

Acts as the notification sink for the dispatcher and as the user's inbox.
"""

from typing import Optional

from bson import ObjectId

from uniplace.data.database import NOTIFICATIONS
from uniplace.data.models.base import utc_now
from uniplace.data.models.notification import Notification
from uniplace.utils.constants import NotificationType

from .base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for notification operations."""

    @property
    def collection_name(self) -> str:
        return NOTIFICATIONS

    @property
    def model_class(self) -> type[Notification]:
        return Notification

    def enqueue(
        self,
        user_id: str | ObjectId,
        message: str,
        type: NotificationType = NotificationType.INFO,
    ) -> Notification:
        """Store a new unread notification for a user."""
        return self.create(
            Notification(user_id=self._to_object_id(user_id), message=message, type=type)
        )

    def get_for_user(
        self,
        user_id: str | ObjectId,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        """Get a user's notifications, newest first."""
        query: dict = {"user_id": self._to_object_id(user_id)}
        if unread_only:
            query["read"] = False
        return self.find(query, limit=limit, sort_by="created_at")

    def count_unread(self, user_id: str | ObjectId) -> int:
        return self.count({"user_id": self._to_object_id(user_id), "read": False})

    def mark_read(self, notification_id: str | ObjectId, user_id: str | ObjectId) -> bool:
        """Mark one notification read. Only its owner may do so."""
        query = self._id_query(notification_id)
        if query is None:
            return False
        query["user_id"] = self._to_object_id(user_id)
        result = self._get_collection().update_one(
            query, {"$set": {"read": True, "updated_at": utc_now()}}
        )
        return result.matched_count > 0

    def mark_all_read(self, user_id: str | ObjectId) -> int:
        """Mark every unread notification of a user read."""
        result = self._get_collection().update_many(
            {"user_id": self._to_object_id(user_id), "read": False},
            {"$set": {"read": True, "updated_at": utc_now()}},
        )
        return result.modified_count


# Singleton instance
_notification_repository: Optional[NotificationRepository] = None


def get_notification_repository() -> NotificationRepository:
    """Get the notification repository singleton instance."""
    global _notification_repository
    if _notification_repository is None:
        _notification_repository = NotificationRepository()
    return _notification_repository
