"""
Notification dispatcher.

Sends one-way notices to users without holding up the operation that
triggered them. Delivery runs on a small thread pool; a failed delivery
is logged and dropped, never reported back to the caller.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Optional

from bson import ObjectId

from uniplace.utils.config import get_settings
from uniplace.utils.constants import AuditAction, NotificationType
from uniplace.utils.logger import audit_log, get_logger

logger = get_logger(__name__)


class NotificationDispatcher:
    """
    Fire-and-forget notification sender.

    The sink is any object with ``enqueue(user_id, message, type)``,
    normally the NotificationRepository.
    """

    def __init__(
        self,
        sink: Any,
        max_workers: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        settings = get_settings().notifications
        self._sink = sink
        self._enabled = settings.enabled if enabled is None else enabled
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.max_workers,
            thread_name_prefix="uniplace-notify",
        )
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def notify(
        self,
        user_id: str | ObjectId,
        message: str,
        type: NotificationType = NotificationType.INFO,
    ) -> None:
        """
        Queue a notice for a user and return immediately.

        Never raises; the triggering operation succeeds regardless.
        """
        if not self._enabled:
            logger.debug(f"Notifications disabled, dropping notice for {user_id}")
            return

        try:
            future = self._executor.submit(self._deliver, user_id, message, type)
        except RuntimeError as e:
            # Pool already shut down
            self._report_failure(user_id, message, e)
            return

        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def _deliver(self, user_id: str | ObjectId, message: str, type: NotificationType) -> bool:
        try:
            self._sink.enqueue(user_id, message, type)
        except Exception as e:
            self._report_failure(user_id, message, e)
            return False
        logger.debug(f"Notification delivered to {user_id}")
        return True

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    @staticmethod
    def _report_failure(user_id: str | ObjectId, message: str, error: BaseException) -> None:
        logger.opt(exception=error).error(f"Failed to notify {user_id}: {error}")
        audit_log(
            AuditAction.NOTIFICATION_FAILED,
            {"user_id": str(user_id), "message": message, "error": str(error)},
        )

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    @property
    def pending_count(self) -> int:
        """Deliveries queued or running."""
        with self._lock:
            return sum(1 for future in self._pending if not future.done())

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for in-flight deliveries.

        Returns:
            True if everything finished within the timeout
        """
        with self._lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting notices and release the worker threads."""
        self._executor.shutdown(wait=wait)


# Singleton instance
_dispatcher: Optional[NotificationDispatcher] = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """Get the dispatcher writing to the notification repository."""
    global _dispatcher
    if _dispatcher is None:
        from uniplace.data.repositories import get_notification_repository

        _dispatcher = NotificationDispatcher(get_notification_repository())
    return _dispatcher
