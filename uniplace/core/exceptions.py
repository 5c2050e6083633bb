"""
Business-rule errors raised by the placement engine.

Every error here is a rejected operation the initiating actor can correct.
Storage or collaborator failures are not wrapped and propagate as raised.
"""

from typing import Optional


class PlacementError(Exception):
    """
    Base class for business-rule rejections.

    Attributes:
        code: Stable machine-readable error kind
        message: Text suitable for showing to the actor
    """

    code: str = "placement_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotEligibleError(PlacementError):
    """The student does not satisfy the posting's eligibility criteria."""

    code = "not_eligible"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"You are not eligible. {reason}")


class AlreadyAppliedError(PlacementError):
    """An application already exists for this student and posting."""

    code = "already_applied"

    def __init__(self, student_id: object, posting_id: object):
        self.student_id = str(student_id)
        self.posting_id = str(posting_id)
        super().__init__("You have already applied to this posting")


class PostingClosedError(PlacementError):
    """The posting no longer accepts applications."""

    code = "posting_closed"

    def __init__(self, posting_id: object, detail: str = "recruiting has stopped"):
        self.posting_id = str(posting_id)
        super().__init__(f"This posting is closed: {detail}")


class ResumeRequiredError(PlacementError):
    """The student must upload a resume before applying."""

    code = "resume_required"

    def __init__(self) -> None:
        super().__init__("Please upload a resume in your Profile before applying")


class UnauthorizedError(PlacementError):
    """The actor may not perform this operation."""

    code = "unauthorized"

    def __init__(self, actor_id: object, action: str):
        self.actor_id = str(actor_id)
        self.action = action
        super().__init__(f"Not authorized to {action}")


class NotFoundError(PlacementError):
    """A referenced entity does not exist."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = str(entity_id)
        super().__init__(f"{entity} not found: {entity_id}")


class AlreadyStoppedError(PlacementError):
    """The posting has already been stopped."""

    code = "already_stopped"

    def __init__(self, posting_id: object):
        self.posting_id = str(posting_id)
        super().__init__("Recruiting on this posting has already stopped")


class InvalidTransitionError(PlacementError):
    """The requested status change is not an edge of the workflow."""

    code = "invalid_transition"

    def __init__(self, from_status: str, to_status: str, allowed: Optional[list[str]] = None):
        self.from_status = from_status
        self.to_status = to_status
        self.allowed = allowed or []
        options = ", ".join(self.allowed) if self.allowed else "none"
        super().__init__(
            f"Cannot move an application from {from_status} to {to_status} "
            f"(allowed: {options})"
        )


class InvalidStatusError(PlacementError):
    """The value is not a known application status."""

    code = "invalid_status"

    def __init__(self, status: object):
        self.status = str(status)
        super().__init__(f"Unknown application status: {status}")
