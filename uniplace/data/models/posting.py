"""
Job posting data models for UniPlace.

Defines the schema for postings published by companies, including the
eligibility criteria students are checked against.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from uniplace.utils.constants import MAX_CGPA, MIN_CGPA, JobType, PostingStatus

from .base import BaseDocument, PyObjectId, as_naive_utc, utc_now


def _clean_branches(branches: list[str]) -> list[str]:
    return [b.strip() for b in branches if b and b.strip()]


class Posting(BaseDocument):
    """
    A job or internship opening published by a company.

    Status only moves Active -> Stopped; a stopped posting is never reopened.
    """

    # Ownership
    company_id: PyObjectId
    company_name: str = ""

    # Basic Information
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    job_type: JobType = JobType.INTERNSHIP
    package: Optional[float] = Field(default=None, ge=0)  # LPA
    location: str = ""
    rounds: list[str] = Field(default_factory=list)

    # Eligibility criteria
    min_cgpa: float = Field(default=0.0, ge=MIN_CGPA, le=MAX_CGPA)
    eligible_branches: list[str] = Field(default_factory=list)  # Empty = all branches

    # Status & Dates
    status: PostingStatus = PostingStatus.ACTIVE
    posted_date: datetime = Field(default_factory=utc_now)
    deadline: datetime

    @field_validator("eligible_branches")
    @classmethod
    def strip_branches(cls, v: list[str]) -> list[str]:
        """Drop blank branch entries."""
        return _clean_branches(v)

    @field_validator("posted_date", "deadline")
    @classmethod
    def normalize_dates(cls, v: datetime) -> datetime:
        """Store dates as naive UTC, whatever offset they arrived with."""
        return as_naive_utc(v)

    @property
    def is_active(self) -> bool:
        """Check if the company is still recruiting on this posting."""
        return PostingStatus(self.status) == PostingStatus.ACTIVE

    def is_past_deadline(self, now: Optional[datetime] = None) -> bool:
        """Check whether the application deadline has passed."""
        return as_naive_utc(now or utc_now()) > self.deadline


class PostingCreate(BaseModel):
    """Schema a company submits to publish a posting."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    job_type: JobType = JobType.INTERNSHIP
    package: Optional[float] = Field(default=None, ge=0)
    location: str = ""
    rounds: list[str] = Field(default_factory=list)
    min_cgpa: float = Field(default=0.0, ge=MIN_CGPA, le=MAX_CGPA)
    eligible_branches: list[str] = Field(default_factory=list)
    deadline: datetime

    @field_validator("eligible_branches")
    @classmethod
    def strip_branches(cls, v: list[str]) -> list[str]:
        """Drop blank branch entries."""
        return _clean_branches(v)

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, v: datetime) -> datetime:
        return as_naive_utc(v)
