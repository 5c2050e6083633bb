"""
Tests for uniplace.core.lifecycle: submission, status changes and posting closure.

Runs against the in-memory repositories and a recording dispatcher from
conftest, so notifications are observed synchronously.
"""

import threading
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

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
from uniplace.core.lifecycle import ApplicationLifecycleManager, Authorizer
from uniplace.data.models import PostingCreate
from uniplace.data.models.base import utc_now
from uniplace.utils.constants import ApplicationStatus, NotificationType, PostingStatus


@pytest.fixture
def student(student_repo, make_student):
    return student_repo.add(make_student())


@pytest.fixture
def posting(posting_repo, make_posting):
    return posting_repo.add(make_posting())


@pytest.fixture
def application(lifecycle, student, posting, dispatcher):
    created = lifecycle.submit(student.id, posting)
    dispatcher.sent.clear()
    return created


def _manager(repos, **overrides):
    student_repo, posting_repo, application_repo, dispatcher = repos
    options = dict(
        students=student_repo,
        postings=posting_repo,
        applications=application_repo,
        dispatcher=dispatcher,
        authorizer=Authorizer(posting_repo, admin_ids=[]),
        require_resume=False,
        enforce_deadline=False,
        enforce_transitions=False,
    )
    options.update(overrides)
    return ApplicationLifecycleManager(**options)


@pytest.fixture
def repos(student_repo, posting_repo, application_repo, dispatcher):
    return student_repo, posting_repo, application_repo, dispatcher


# ── submit ───────────────────────────────────────────────────────────────────


class TestSubmit:
    def test_creates_applied_application(self, lifecycle, student, posting, application_repo):
        created = lifecycle.submit(student.id, posting)
        assert created.id is not None
        assert created.status == ApplicationStatus.APPLIED.value
        assert created.student_name == student.name
        assert created.posting_title == posting.title
        assert application_repo.get_by_id(created.id) is not None

    def test_accepts_string_student_id(self, lifecycle, student, posting):
        assert lifecycle.submit(str(student.id), posting).student_id == student.id

    def test_notifies_company(self, lifecycle, student, posting, dispatcher):
        lifecycle.submit(student.id, posting)
        assert dispatcher.sent == [
            (
                posting.company_id,
                f"New applicant {student.name} for {posting.title}",
                NotificationType.INFO,
            )
        ]

    def test_apply_twice_rejected(self, lifecycle, student, posting, application_repo):
        lifecycle.submit(student.id, posting)
        with pytest.raises(AlreadyAppliedError):
            lifecycle.submit(student.id, posting)
        assert len(application_repo.all()) == 1

    def test_concurrent_duplicates_store_one(self, lifecycle, student, posting, application_repo):
        barrier = threading.Barrier(8)
        outcomes = []
        lock = threading.Lock()

        def attempt():
            barrier.wait()
            try:
                lifecycle.submit(student.id, posting)
                result = "ok"
            except AlreadyAppliedError:
                result = "duplicate"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("duplicate") == 7
        assert len(application_repo.all()) == 1

    def test_stopped_posting_rejected_even_if_eligible(self, lifecycle, student, make_posting, posting_repo):
        stopped = posting_repo.add(make_posting(status=PostingStatus.STOPPED))
        with pytest.raises(PostingClosedError):
            lifecycle.submit(student.id, stopped)

    def test_unknown_student(self, lifecycle, posting):
        with pytest.raises(NotFoundError):
            lifecycle.submit(ObjectId(), posting)

    def test_malformed_student_id(self, lifecycle, posting):
        with pytest.raises(NotFoundError):
            lifecycle.submit("not-an-id", posting)

    def test_not_eligible_carries_reason(self, lifecycle, student_repo, make_student, posting):
        weak = student_repo.add(make_student(cgpa=6.0))
        with pytest.raises(NotEligibleError) as exc_info:
            lifecycle.submit(weak.id, posting)
        assert exc_info.value.reason == "Requires 7+ CGPA"
        assert "Requires 7+ CGPA" in exc_info.value.message

    def test_ineligible_creates_nothing(self, lifecycle, student_repo, make_student, posting, application_repo, dispatcher):
        other = student_repo.add(make_student(branch="Mechanical"))
        with pytest.raises(NotEligibleError):
            lifecycle.submit(other.id, posting)
        assert application_repo.all() == []
        assert dispatcher.sent == []

    def test_resume_required_when_enabled(self, repos, student_repo, make_student, posting):
        manager = _manager(repos, require_resume=True)
        no_resume = student_repo.add(make_student(resume_ref=None))
        with pytest.raises(ResumeRequiredError):
            manager.submit(no_resume.id, posting)

    def test_resume_not_required_by_default(self, lifecycle, student_repo, make_student, posting):
        no_resume = student_repo.add(make_student(resume_ref=None))
        assert lifecycle.submit(no_resume.id, posting).id is not None

    def test_deadline_enforced_when_enabled(self, repos, student, posting_repo, make_posting):
        manager = _manager(repos, enforce_deadline=True)
        expired = posting_repo.add(make_posting(deadline=utc_now() - timedelta(days=1)))
        with pytest.raises(PostingClosedError, match="deadline"):
            manager.submit(student.id, expired)

    def test_aware_past_deadline_enforced(self, repos, student, posting_repo, make_posting):
        manager = _manager(repos, enforce_deadline=True)
        expired = posting_repo.add(make_posting(deadline="2020-01-01T09:00:00+05:30"))
        with pytest.raises(PostingClosedError, match="deadline"):
            manager.submit(student.id, expired)

    def test_aware_future_deadline_accepted(self, repos, student, posting_repo, make_posting):
        manager = _manager(repos, enforce_deadline=True)
        later = (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()
        open_posting = posting_repo.add(make_posting(deadline=later))
        assert manager.submit(student.id, open_posting).id is not None

    def test_posting_created_with_aware_deadline(self, repos, student, posting_repo):
        manager = _manager(repos, enforce_deadline=True)
        data = PostingCreate(title="SDE Intern", deadline="2021-06-30T18:00:00Z")
        expired = posting_repo.create_from_schema(ObjectId(), "Acme Systems", data)
        with pytest.raises(PostingClosedError):
            manager.submit(student.id, expired)

    def test_deadline_ignored_by_default(self, lifecycle, student, posting_repo, make_posting):
        expired = posting_repo.add(make_posting(deadline=utc_now() - timedelta(days=1)))
        assert lifecycle.submit(student.id, expired).id is not None


# ── transition ───────────────────────────────────────────────────────────────


class TestTransition:
    def test_owner_moves_to_offered_and_student_notified(self, lifecycle, application, posting, dispatcher):
        updated = lifecycle.transition(application.id, ApplicationStatus.OFFERED, posting.company_id)
        assert updated.status == ApplicationStatus.OFFERED.value

        assert len(dispatcher.sent) == 1
        user_id, message, type_ = dispatcher.sent[0]
        assert user_id == application.student_id
        assert posting.title in message
        assert "Offered" in message
        assert message == f"Your application for {posting.title} is now Offered"
        assert type_ == NotificationType.SUCCESS

    def test_rejection_notice_is_error(self, lifecycle, application, posting, dispatcher):
        lifecycle.transition(application.id, "Rejected", posting.company_id)
        assert dispatcher.sent[0][2] == NotificationType.ERROR

    def test_history_and_feedback_recorded(self, lifecycle, application, posting, application_repo):
        lifecycle.transition(
            application.id, "Shortlisted", str(posting.company_id), feedback="Strong DSA round"
        )
        stored = application_repo.get_by_id(application.id)
        assert stored.feedback == "Strong DSA round"
        assert len(stored.status_history) == 1
        change = stored.status_history[0]
        assert change.from_status == "Applied"
        assert change.to_status == "Shortlisted"
        assert change.actor_id == str(posting.company_id)

    def test_admin_may_transition(self, lifecycle, application, admin_id):
        updated = lifecycle.transition(application.id, "Interview Scheduled", admin_id)
        assert updated.status == "Interview Scheduled"

    def test_other_company_unauthorized(self, lifecycle, application, application_repo, dispatcher):
        with pytest.raises(UnauthorizedError):
            lifecycle.transition(application.id, "Offered", ObjectId())
        assert application_repo.get_by_id(application.id).status == "Applied"
        assert dispatcher.sent == []

    def test_ownership_rechecked_each_call(self, lifecycle, application, posting, posting_repo):
        owner = posting.company_id
        lifecycle.transition(application.id, "Shortlisted", owner)

        # Hand the posting to another company
        posting_repo._items[posting.id].company_id = ObjectId()
        with pytest.raises(UnauthorizedError):
            lifecycle.transition(application.id, "Offered", owner)

    def test_unknown_application(self, lifecycle, posting):
        with pytest.raises(NotFoundError):
            lifecycle.transition(ObjectId(), "Offered", posting.company_id)

    def test_missing_posting(self, lifecycle, application, posting, posting_repo):
        del posting_repo._items[posting.id]
        with pytest.raises(NotFoundError):
            lifecycle.transition(application.id, "Offered", posting.company_id)

    def test_unknown_status(self, lifecycle, application, posting):
        with pytest.raises(InvalidTransitionError):
            lifecycle.transition(application.id, "Hired", posting.company_id)

    def test_any_status_accepted_by_default(self, lifecycle, application, posting):
        lifecycle.transition(application.id, "Rejected", posting.company_id)
        updated = lifecycle.transition(application.id, "Applied", posting.company_id)
        assert updated.status == "Applied"

    def test_enforced_graph_rejects_illegal_move(self, repos, application, posting):
        manager = _manager(repos, enforce_transitions=True)
        with pytest.raises(InvalidTransitionError) as exc_info:
            manager.transition(application.id, "Offered", posting.company_id)
        assert exc_info.value.allowed == ["Interview Scheduled", "Rejected", "Shortlisted"]

    def test_enforced_graph_terminal_status(self, repos, application, posting):
        manager = _manager(repos, enforce_transitions=True)
        manager.transition(application.id, "Rejected", posting.company_id)
        with pytest.raises(InvalidTransitionError):
            manager.transition(application.id, "Shortlisted", posting.company_id)

    def test_enforced_graph_allows_legal_path(self, repos, application, posting):
        manager = _manager(repos, enforce_transitions=True)
        manager.transition(application.id, "Shortlisted", posting.company_id)
        assert manager.transition(application.id, "Offered", posting.company_id).status == "Offered"

    def test_stopped_posting_applications_still_manageable(self, lifecycle, application, posting):
        lifecycle.stop_posting(posting.id, posting.company_id)
        updated = lifecycle.transition(application.id, "Offered", posting.company_id)
        assert updated.status == "Offered"


# ── stop_posting ─────────────────────────────────────────────────────────────


class TestStopPosting:
    def test_owner_stops(self, lifecycle, posting, posting_repo):
        stopped = lifecycle.stop_posting(posting.id, posting.company_id)
        assert stopped.status == PostingStatus.STOPPED.value
        assert posting_repo.get_by_id(posting.id).is_active is False

    def test_applications_untouched(self, lifecycle, application, posting, application_repo):
        lifecycle.transition(application.id, "Shortlisted", posting.company_id)
        lifecycle.stop_posting(posting.id, posting.company_id)
        assert application_repo.get_by_id(application.id).status == "Shortlisted"

    def test_stop_twice(self, lifecycle, posting):
        lifecycle.stop_posting(posting.id, posting.company_id)
        with pytest.raises(AlreadyStoppedError):
            lifecycle.stop_posting(posting.id, posting.company_id)

    def test_non_owner(self, lifecycle, posting, posting_repo):
        with pytest.raises(UnauthorizedError):
            lifecycle.stop_posting(posting.id, ObjectId())
        assert posting_repo.get_by_id(posting.id).is_active is True

    def test_admin(self, lifecycle, posting, admin_id):
        assert lifecycle.stop_posting(posting.id, admin_id).is_active is False

    def test_unknown_posting(self, lifecycle):
        with pytest.raises(NotFoundError):
            lifecycle.stop_posting(ObjectId(), ObjectId())

    def test_new_applications_blocked_after_stop(self, lifecycle, posting, posting_repo, student):
        lifecycle.stop_posting(posting.id, posting.company_id)
        with pytest.raises(PostingClosedError):
            lifecycle.submit(student.id, posting_repo.get_by_id(posting.id))


# ── check_eligibility ────────────────────────────────────────────────────────


class TestCheckEligibility:
    def test_verdict(self, lifecycle, student, posting):
        assert lifecycle.check_eligibility(student.id, posting.id).eligible is True

    def test_unknown_posting(self, lifecycle, student):
        with pytest.raises(NotFoundError):
            lifecycle.check_eligibility(student.id, ObjectId())


class TestAuthorizer:
    def test_owner(self, authorizer, posting):
        assert authorizer.is_owner(posting.company_id, posting.id) is True
        assert authorizer.is_owner(str(posting.company_id), str(posting.id)) is True

    def test_not_owner(self, authorizer, posting):
        assert authorizer.is_owner(ObjectId(), posting.id) is False

    def test_admin_from_ids(self, authorizer, admin_id):
        assert authorizer.is_admin(admin_id) is True
        assert authorizer.is_admin(ObjectId()) is False

    def test_can_manage(self, authorizer, posting, admin_id):
        assert authorizer.can_manage(admin_id, posting.id) is True
        assert authorizer.can_manage(posting.company_id, posting.id) is True
        assert authorizer.can_manage(ObjectId(), posting.id) is False
