"""
Student data models for UniPlace.

A student owns their profile; only the student's own edits change it.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from uniplace.utils.constants import MAX_CGPA, MIN_CGPA

from .base import BaseDocument


class Student(BaseDocument):
    """A student profile as seen by the eligibility rules."""

    name: str = Field(..., min_length=1, max_length=120)
    email: Optional[str] = None
    roll_number: Optional[str] = None

    # Academic record
    branch: str = ""  # Free text, e.g. "B.Tech CSE"
    course: Optional[str] = None
    graduation_year: Optional[int] = None
    cgpa: Optional[float] = Field(default=None, ge=MIN_CGPA, le=MAX_CGPA)
    skills: list[str] = Field(default_factory=list)

    # Opaque handle to the uploaded resume in the blob store
    resume_ref: Optional[str] = None

    @field_validator("branch", mode="before")
    @classmethod
    def none_branch_to_empty(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v

    @property
    def has_resume(self) -> bool:
        """Check whether a resume has been uploaded."""
        return bool(self.resume_ref)


class StudentUpdate(BaseModel):
    """Schema for a student's own profile edits."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    course: Optional[str] = None
    graduation_year: Optional[int] = None
    cgpa: Optional[float] = Field(None, ge=MIN_CGPA, le=MAX_CGPA)
    skills: Optional[list[str]] = None
    resume_ref: Optional[str] = None
