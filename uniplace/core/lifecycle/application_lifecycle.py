"""
Application lifecycle for UniPlace.

Owns the rules for creating applications, moving them through recruiter
statuses, and closing postings to new applicants.
"""

from typing import Any, Optional

from bson import ObjectId

from uniplace.core.eligibility import EligibilityEvaluator, EligibilityVerdict
from uniplace.core.exceptions import (
    AlreadyAppliedError,
    AlreadyStoppedError,
    InvalidTransitionError,
    NotEligibleError,
    NotFoundError,
    PostingClosedError,
    ResumeRequiredError,
    UnauthorizedError,
)
from uniplace.data.models import Application, Posting, StatusChange
from uniplace.data.models.base import utc_now
from uniplace.utils.config import get_settings
from uniplace.utils.constants import (
    ALLOWED_TRANSITIONS,
    STATUS_NOTIFICATION_TYPES,
    ApplicationStatus,
    AuditAction,
    NotificationType,
)
from uniplace.utils.logger import LoggerMixin, audit_log


class ApplicationLifecycleManager(LoggerMixin):
    """
    Creates applications and drives their status changes.

    Collaborators are passed in so storage can be swapped:
        students / postings / applications: repositories (or equivalents)
        dispatcher: anything with notify(user_id, message, type)
        authorizer: anything with can_manage(actor_id, posting_id)

    Policy switches default to the configured values and can be
    overridden per instance.
    """

    def __init__(
        self,
        students: Any,
        postings: Any,
        applications: Any,
        dispatcher: Any,
        authorizer: Any,
        evaluator: Optional[EligibilityEvaluator] = None,
        require_resume: Optional[bool] = None,
        enforce_deadline: Optional[bool] = None,
        enforce_transitions: Optional[bool] = None,
    ):
        settings = get_settings()
        self.students = students
        self.postings = postings
        self.applications = applications
        self.dispatcher = dispatcher
        self.authorizer = authorizer
        self.evaluator = evaluator or EligibilityEvaluator()

        self.require_resume = (
            settings.eligibility.require_resume if require_resume is None else require_resume
        )
        self.enforce_deadline = (
            settings.eligibility.enforce_deadline if enforce_deadline is None else enforce_deadline
        )
        self.enforce_transitions = (
            settings.lifecycle.enforce_transitions
            if enforce_transitions is None
            else enforce_transitions
        )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def _load_student(self, student_id: str | ObjectId):
        student = self.students.get_by_id(student_id)
        if student is None:
            raise NotFoundError("Student", student_id)
        return student

    def _load_posting(self, posting_id: str | ObjectId) -> Posting:
        posting = self.postings.get_by_id(posting_id)
        if posting is None:
            raise NotFoundError("Posting", posting_id)
        return posting

    def _load_application(self, application_id: str | ObjectId) -> Application:
        application = self.applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Application", application_id)
        return application

    def _require_manager(self, actor_id: str | ObjectId, posting_id: ObjectId, action: str) -> None:
        if not self.authorizer.can_manage(actor_id, posting_id):
            self.logger.warning(f"Actor {actor_id} refused: {action} on posting {posting_id}")
            raise UnauthorizedError(actor_id, action)

    # -------------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------------

    def check_eligibility(
        self, student_id: str | ObjectId, posting_id: str | ObjectId
    ) -> EligibilityVerdict:
        """Read-only verdict for a student against a posting."""
        student = self._load_student(student_id)
        posting = self._load_posting(posting_id)
        return self.evaluator.evaluate(student, posting)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit(self, student_id: str | ObjectId, posting: Posting) -> Application:
        """
        Create an application for a student to a posting.

        Raises:
            PostingClosedError: Posting is stopped (or past its deadline when enforced)
            NotFoundError: Unknown student
            ResumeRequiredError: Student has no resume and one is required
            NotEligibleError: Student fails the eligibility criteria
            AlreadyAppliedError: An application for the pair already exists
        """
        if not posting.is_active:
            raise PostingClosedError(posting.id)
        if self.enforce_deadline and posting.is_past_deadline():
            raise PostingClosedError(posting.id, detail="the application deadline has passed")

        student = self._load_student(student_id)

        if self.require_resume and not student.has_resume:
            raise ResumeRequiredError()

        if self.applications.get_by_posting_and_student(posting.id, student.id) is not None:
            raise AlreadyAppliedError(student.id, posting.id)

        verdict = self.evaluator.evaluate(student, posting)
        if not verdict.eligible:
            raise NotEligibleError(verdict.reason)

        application = Application(
            posting_id=posting.id,
            student_id=student.id,
            student_name=student.name,
            posting_title=posting.title,
            company_name=posting.company_name,
        )
        stored = self.applications.insert_if_absent(application)
        if stored is None:
            raise AlreadyAppliedError(student.id, posting.id)

        self.logger.info(f"Student {student.id} applied to posting {posting.id}")
        audit_log(
            AuditAction.APPLICATION_SUBMITTED,
            {
                "application_id": str(stored.id),
                "posting_id": str(posting.id),
                "student_id": str(student.id),
            },
        )
        self.dispatcher.notify(
            posting.company_id,
            f"New applicant {student.name} for {posting.title}",
            NotificationType.INFO,
        )
        return stored

    # -------------------------------------------------------------------------
    # Status Transitions
    # -------------------------------------------------------------------------

    def allowed_next(self, status: ApplicationStatus | str) -> list[str]:
        """Statuses reachable from the given one under the transition graph."""
        return sorted(s.value for s in ALLOWED_TRANSITIONS[ApplicationStatus(status)])

    def transition(
        self,
        application_id: str | ObjectId,
        new_status: ApplicationStatus | str,
        actor_id: str | ObjectId,
        feedback: Optional[str] = None,
    ) -> Application:
        """
        Move an application to a new status on behalf of a recruiter.

        Raises:
            NotFoundError: Unknown application or posting
            UnauthorizedError: Actor neither owns the posting nor is admin
            InvalidTransitionError: Unknown status, or an illegal move while
                transitions are enforced
        """
        application = self._load_application(application_id)
        posting = self._load_posting(application.posting_id)
        self._require_manager(actor_id, posting.id, "update application status")

        current = application.current_status
        try:
            target = ApplicationStatus(new_status)
        except ValueError:
            raise InvalidTransitionError(current.value, str(new_status))

        if self.enforce_transitions and target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransitionError(current.value, target.value, self.allowed_next(current))

        change = StatusChange(
            from_status=current,
            to_status=target,
            actor_id=str(actor_id),
            changed_at=utc_now(),
            feedback=feedback,
        )
        updated = self.applications.record_transition(application.id, change)
        if updated is None:
            raise NotFoundError("Application", application_id)

        self.logger.info(
            f"Application {application.id}: {current.value} -> {target.value} by {actor_id}"
        )
        audit_log(
            AuditAction.APPLICATION_STATUS_CHANGED,
            {
                "application_id": str(application.id),
                "posting_id": str(posting.id),
                "from_status": current.value,
                "to_status": target.value,
                "actor_id": str(actor_id),
            },
        )
        self.dispatcher.notify(
            application.student_id,
            f"Your application for {posting.title} is now {target.value}",
            STATUS_NOTIFICATION_TYPES.get(target, NotificationType.INFO),
        )
        return updated

    # -------------------------------------------------------------------------
    # Posting Closure
    # -------------------------------------------------------------------------

    def stop_posting(self, posting_id: str | ObjectId, actor_id: str | ObjectId) -> Posting:
        """
        Close a posting to new applicants.

        Existing applications keep their status and stay manageable.

        Raises:
            NotFoundError: Unknown posting
            UnauthorizedError: Actor neither owns the posting nor is admin
            AlreadyStoppedError: Posting was not Active
        """
        posting = self._load_posting(posting_id)
        self._require_manager(actor_id, posting.id, "stop recruiting")

        if not posting.is_active:
            raise AlreadyStoppedError(posting.id)

        stopped = self.postings.mark_stopped(posting.id)
        if stopped is None:
            # Stopped concurrently between the read and the update
            raise AlreadyStoppedError(posting.id)

        self.logger.info(f"Posting {posting.id} stopped by {actor_id}")
        audit_log(
            AuditAction.POSTING_STOPPED,
            {"posting_id": str(posting.id), "actor_id": str(actor_id)},
        )
        return stopped
