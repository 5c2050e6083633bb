"""
Notification data model for UniPlace.
"""

from pydantic import Field

from uniplace.utils.constants import NotificationType

from .base import BaseDocument, PyObjectId


class Notification(BaseDocument):
    """A message for one user, created as a side effect of an event."""

    user_id: PyObjectId
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.INFO
    read: bool = False
