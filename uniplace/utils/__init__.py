"""
Utility modules for UniPlace.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Enums and the branch taxonomy table
"""

from uniplace.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    PACKAGE_DIR,
    DATA_DIR,
)
from uniplace.utils.constants import (
    ALLOWED_TRANSITIONS,
    AUDIT_CATEGORIES,
    BRANCH_ALIASES,
    ApplicationStatus,
    AuditAction,
    AuditCategory,
    JobType,
    NotificationType,
    PostingStatus,
)
from uniplace.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "PACKAGE_DIR",
    "DATA_DIR",
    # Constants
    "ALLOWED_TRANSITIONS",
    "AUDIT_CATEGORIES",
    "BRANCH_ALIASES",
    "ApplicationStatus",
    "AuditAction",
    "AuditCategory",
    "JobType",
    "NotificationType",
    "PostingStatus",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
]
