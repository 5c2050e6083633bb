"""
Application-wide constants for UniPlace.

This module contains the enums shared by models and business logic, and
the canonical branch taxonomy used to reconcile free-text branch names.
"""

from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping


# =============================================================================
# Profile Bounds
# =============================================================================

MIN_CGPA: Final[float] = 0.0
MAX_CGPA: Final[float] = 10.0


# =============================================================================
# Branch Taxonomy
# =============================================================================

# Canonical category -> lowercase alias substrings, in match priority order.
# Read-only: every caller shares this one table.
BRANCH_ALIASES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "Computer Science": (
            "cse", "cs", "computer", "btech cse", "b.tech cse", "computer science",
        ),
        "Information Technology": (
            "it", "infotech", "btech it", "b.tech it", "information technology",
        ),
        "Electronics": (
            "ece", "eee", "electronics", "electrical", "btech ece", "b.tech ece",
        ),
        "Mechanical": (
            "mech", "me", "mechanical", "btech mech", "b.tech mech",
        ),
        "Civil": (
            "civil", "ce", "btech civil", "b.tech civil",
        ),
    }
)


# =============================================================================
# Enums
# =============================================================================


class JobType(str, Enum):
    """Kind of opening a posting advertises."""

    FULL_TIME = "Full Time"
    INTERNSHIP = "Internship"


class PostingStatus(str, Enum):
    """Status of a job posting. Stopped is final."""

    ACTIVE = "Active"
    STOPPED = "Stopped"


class ApplicationStatus(str, Enum):
    """Status of an application in the review pipeline."""

    APPLIED = "Applied"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"
    OFFERED = "Offered"

    @property
    def is_terminal(self) -> bool:
        """True when no transition leads out of this status."""
        return not ALLOWED_TRANSITIONS[self]


class NotificationType(str, Enum):
    """Severity shown alongside a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class AuditAction(str, Enum):
    """Types of actions that are written to the audit log."""

    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_STATUS_CHANGED = "application_status_changed"
    POSTING_CREATED = "posting_created"
    POSTING_STOPPED = "posting_stopped"
    NOTIFICATION_FAILED = "notification_failed"


class AuditCategory(str, Enum):
    """Audit log section an action is filed under."""

    APPLICATION = "APPLICATION"
    POSTING = "POSTING"
    DELIVERY = "DELIVERY"


# =============================================================================
# Application Workflow
# =============================================================================

ALLOWED_TRANSITIONS: Final[Mapping[ApplicationStatus, frozenset[ApplicationStatus]]] = MappingProxyType(
    {
        ApplicationStatus.APPLIED: frozenset(
            {
                ApplicationStatus.INTERVIEW_SCHEDULED,
                ApplicationStatus.SHORTLISTED,
                ApplicationStatus.REJECTED,
            }
        ),
        ApplicationStatus.INTERVIEW_SCHEDULED: frozenset(
            {ApplicationStatus.OFFERED, ApplicationStatus.REJECTED}
        ),
        ApplicationStatus.SHORTLISTED: frozenset(
            {ApplicationStatus.OFFERED, ApplicationStatus.REJECTED}
        ),
        ApplicationStatus.OFFERED: frozenset(),
        ApplicationStatus.REJECTED: frozenset(),
    }
)

# Audit log section for each audited action
AUDIT_CATEGORIES: Final[Mapping[AuditAction, AuditCategory]] = MappingProxyType(
    {
        AuditAction.APPLICATION_SUBMITTED: AuditCategory.APPLICATION,
        AuditAction.APPLICATION_STATUS_CHANGED: AuditCategory.APPLICATION,
        AuditAction.POSTING_CREATED: AuditCategory.POSTING,
        AuditAction.POSTING_STOPPED: AuditCategory.POSTING,
        AuditAction.NOTIFICATION_FAILED: AuditCategory.DELIVERY,
    }
)

# Notification severity for a status change sent to the student
STATUS_NOTIFICATION_TYPES: Final[Mapping[ApplicationStatus, NotificationType]] = MappingProxyType(
    {
        ApplicationStatus.APPLIED: NotificationType.INFO,
        ApplicationStatus.INTERVIEW_SCHEDULED: NotificationType.SUCCESS,
        ApplicationStatus.SHORTLISTED: NotificationType.SUCCESS,
        ApplicationStatus.OFFERED: NotificationType.SUCCESS,
        ApplicationStatus.REJECTED: NotificationType.ERROR,
    }
)
