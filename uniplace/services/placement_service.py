"""
Placement service for UniPlace.

Entry point used by the portal's request handlers and the CLI. Wires the
repositories, eligibility evaluator, lifecycle manager and notification
dispatcher together and exposes the operations the outer surfaces call.
"""

from typing import Optional

from bson import ObjectId

from uniplace.core.eligibility import EligibilityEvaluator, EligibilityVerdict
from uniplace.core.exceptions import InvalidStatusError, NotFoundError, UnauthorizedError
from uniplace.core.lifecycle import ApplicationLifecycleManager, Authorizer
from uniplace.core.notifications import NotificationDispatcher
from uniplace.data.models import (
    Application,
    Notification,
    Posting,
    PostingCreate,
    Student,
    StudentUpdate,
)
from uniplace.data.models.base import parse_object_id
from uniplace.data.repositories import (
    ApplicationRepository,
    NotificationRepository,
    PostingRepository,
    StudentRepository,
)
from uniplace.utils.constants import ApplicationStatus, AuditAction
from uniplace.utils.logger import LoggerMixin, audit_log


def _object_id(entity: str, value: str | ObjectId) -> ObjectId:
    """Parse a caller-supplied id; malformed ids are reported as not found."""
    try:
        return parse_object_id(value)
    except ValueError:
        raise NotFoundError(entity, value)


class PlacementService(LoggerMixin):
    """
    High-level placement operations.

    Usage:
        service = get_placement_service()
        verdict = service.get_eligibility(student_id, posting_id)
        if verdict.eligible:
            application = service.apply(student_id, posting_id)
    """

    def __init__(
        self,
        students: StudentRepository,
        postings: PostingRepository,
        applications: ApplicationRepository,
        notifications: NotificationRepository,
        dispatcher: Optional[NotificationDispatcher] = None,
        authorizer: Optional[Authorizer] = None,
        evaluator: Optional[EligibilityEvaluator] = None,
        lifecycle: Optional[ApplicationLifecycleManager] = None,
    ):
        self.students = students
        self.postings = postings
        self.applications = applications
        self.notifications = notifications
        self.dispatcher = dispatcher or NotificationDispatcher(notifications)
        self.authorizer = authorizer or Authorizer(postings)
        self.evaluator = evaluator or EligibilityEvaluator()
        self.lifecycle = lifecycle or ApplicationLifecycleManager(
            students=students,
            postings=postings,
            applications=applications,
            dispatcher=self.dispatcher,
            authorizer=self.authorizer,
            evaluator=self.evaluator,
        )

    # -------------------------------------------------------------------------
    # Student Profiles
    # -------------------------------------------------------------------------

    def update_student_profile(
        self, student_id: str | ObjectId, update: StudentUpdate
    ) -> Student:
        """
        Apply a student's own profile edit.

        Applications already submitted keep their status; eligibility is
        only evaluated again on the next submission.
        """
        student = self.students.update_profile(_object_id("Student", student_id), update)
        if student is None:
            raise NotFoundError("Student", student_id)
        return student

    # -------------------------------------------------------------------------
    # Eligibility and Applications
    # -------------------------------------------------------------------------

    def get_eligibility(
        self, student_id: str | ObjectId, posting_id: str | ObjectId
    ) -> EligibilityVerdict:
        """Whether a student may apply to a posting, with the reason if not."""
        return self.lifecycle.check_eligibility(student_id, posting_id)

    def apply(self, student_id: str | ObjectId, posting_id: str | ObjectId) -> Application:
        """Submit an application for a student."""
        posting = self.postings.get_by_id(posting_id)
        if posting is None:
            raise NotFoundError("Posting", posting_id)
        return self.lifecycle.submit(student_id, posting)

    def update_application_status(
        self,
        application_id: str | ObjectId,
        new_status: ApplicationStatus | str,
        actor_id: str | ObjectId,
        feedback: Optional[str] = None,
    ) -> Application:
        """Recruiter moves an application to a new status."""
        return self.lifecycle.transition(application_id, new_status, actor_id, feedback=feedback)

    def list_student_applications(self, student_id: str | ObjectId) -> list[Application]:
        return self.applications.get_by_student(_object_id("Student", student_id))

    def list_posting_applicants(
        self,
        posting_id: str | ObjectId,
        actor_id: str | ObjectId,
        status: Optional[ApplicationStatus | str] = None,
    ) -> list[Application]:
        """Applicants of a posting. Only its owner or an admin may look."""
        posting = self.postings.get_by_id(posting_id)
        if posting is None:
            raise NotFoundError("Posting", posting_id)
        if not self.authorizer.can_manage(actor_id, posting.id):
            raise UnauthorizedError(actor_id, "view applicants")
        if status is not None:
            try:
                status = ApplicationStatus(status)
            except ValueError:
                raise InvalidStatusError(status)
        return self.applications.get_by_posting(posting.id, status=status)

    # -------------------------------------------------------------------------
    # Postings
    # -------------------------------------------------------------------------

    def create_posting(
        self,
        company_id: str | ObjectId,
        company_name: str,
        data: PostingCreate,
    ) -> Posting:
        """Publish a new Active posting for a company."""
        posting = self.postings.create_from_schema(
            _object_id("Company", company_id), company_name, data
        )
        self.logger.info(f"Posting {posting.id} created by {company_id}")
        audit_log(
            AuditAction.POSTING_CREATED,
            {"posting_id": str(posting.id), "company_id": str(company_id), "title": posting.title},
        )
        return posting

    def stop_posting(self, posting_id: str | ObjectId, actor_id: str | ObjectId) -> Posting:
        """Stop recruiting on a posting."""
        return self.lifecycle.stop_posting(posting_id, actor_id)

    def list_company_postings(self, company_id: str | ObjectId) -> list[Posting]:
        """Every posting a company has published, newest first."""
        return self.postings.get_by_company(_object_id("Company", company_id))

    def list_open_postings(self) -> list[Posting]:
        return self.postings.get_active()

    def list_eligible_postings(self, student_id: str | ObjectId) -> list[Posting]:
        """Open postings the student currently qualifies for."""
        student = self.students.get_by_id(student_id)
        if student is None:
            raise NotFoundError("Student", student_id)
        return list(self.evaluator.filter_eligible(student, self.postings.get_active()))

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def get_notifications(
        self, user_id: str | ObjectId, unread_only: bool = False
    ) -> list[Notification]:
        return self.notifications.get_for_user(
            _object_id("User", user_id), unread_only=unread_only
        )

    def count_unread_notifications(self, user_id: str | ObjectId) -> int:
        return self.notifications.count_unread(_object_id("User", user_id))

    def mark_notification_read(
        self, notification_id: str | ObjectId, user_id: str | ObjectId
    ) -> None:
        """Mark one of the user's notifications read."""
        if not self.notifications.mark_read(notification_id, _object_id("User", user_id)):
            raise NotFoundError("Notification", notification_id)

    def mark_all_notifications_read(self, user_id: str | ObjectId) -> int:
        return self.notifications.mark_all_read(_object_id("User", user_id))


# Singleton instance
_placement_service: Optional[PlacementService] = None


def get_placement_service() -> PlacementService:
    """Get the placement service backed by MongoDB."""
    global _placement_service
    if _placement_service is None:
        from uniplace.core.notifications import get_notification_dispatcher
        from uniplace.data.repositories import (
            get_application_repository,
            get_notification_repository,
            get_posting_repository,
            get_student_repository,
        )

        _placement_service = PlacementService(
            students=get_student_repository(),
            postings=get_posting_repository(),
            applications=get_application_repository(),
            notifications=get_notification_repository(),
            dispatcher=get_notification_dispatcher(),
        )
    return _placement_service
