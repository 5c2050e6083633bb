"""
Pydantic data models and schemas for UniPlace.

This module provides all data models used throughout the application,
including stored documents, the embedded status history, and input schemas.
"""

# Base models
from .base import BaseDocument, PyObjectId, as_naive_utc, parse_object_id, utc_now

# Student models
from .student import Student, StudentUpdate

# Posting models
from .posting import Posting, PostingCreate

# Application models
from .application import Application, StatusChange

# Notification models
from .notification import Notification

__all__ = [
    # Base
    "BaseDocument",
    "PyObjectId",
    "as_naive_utc",
    "parse_object_id",
    "utc_now",
    # Student
    "Student",
    "StudentUpdate",
    # Posting
    "Posting",
    "PostingCreate",
    # Application
    "Application",
    "StatusChange",
    # Notification
    "Notification",
]
