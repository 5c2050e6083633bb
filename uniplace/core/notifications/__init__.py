"""Fire-and-forget notification dispatch."""

from .dispatcher import NotificationDispatcher, get_notification_dispatcher

__all__ = [
    "NotificationDispatcher",
    "get_notification_dispatcher",
]
