"""
Application data models for UniPlace.

An application links one student to one posting and records every status
change it goes through. Applications are never deleted.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from uniplace.utils.constants import ApplicationStatus

from .base import BaseDocument, PyObjectId, utc_now


class StatusChange(BaseModel):
    """One entry of an application's status history, embedded in the application."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    from_status: ApplicationStatus
    to_status: ApplicationStatus
    actor_id: str
    changed_at: datetime = Field(default_factory=utc_now)
    feedback: Optional[str] = None


class Application(BaseDocument):
    """A student's request to be considered for a posting."""

    posting_id: PyObjectId
    student_id: PyObjectId

    # Snapshot of display fields taken at submission time
    student_name: str = ""
    posting_title: str = ""
    company_name: str = ""

    status: ApplicationStatus = ApplicationStatus.APPLIED
    applied_at: datetime = Field(default_factory=utc_now)
    feedback: Optional[str] = None  # Latest recruiter note
    status_history: list[StatusChange] = Field(default_factory=list)

    @property
    def current_status(self) -> ApplicationStatus:
        return ApplicationStatus(self.status)
