"""
Database repositories for UniPlace data access.

This module provides repository classes for all database collections,
implementing the repository pattern for clean data access.
"""

# Base repository
from .base import BaseRepository

# Entity repositories
from .student_repository import StudentRepository, get_student_repository
from .posting_repository import PostingRepository, get_posting_repository
from .application_repository import ApplicationRepository, get_application_repository
from .notification_repository import NotificationRepository, get_notification_repository

__all__ = [
    # Base
    "BaseRepository",
    # Student
    "StudentRepository",
    "get_student_repository",
    # Posting
    "PostingRepository",
    "get_posting_repository",
    # Application
    "ApplicationRepository",
    "get_application_repository",
    # Notification
    "NotificationRepository",
    "get_notification_repository",
]
