"""
Shared test fixtures for the UniPlace test suite.

Sets environment variables before any uniplace imports to prevent config
failures, then provides model factories and in-memory stand-ins for the
MongoDB repositories that honor the same contracts.
"""

import os

# === Set environment BEFORE any uniplace imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "uniplace_test")

import threading
from datetime import datetime, timedelta
from typing import Any, Optional

import pytest
from bson import ObjectId

from uniplace.core.eligibility import EligibilityEvaluator
from uniplace.core.lifecycle import ApplicationLifecycleManager, Authorizer
from uniplace.core.notifications import NotificationDispatcher
from uniplace.data.models import (
    Application,
    Notification,
    Posting,
    PostingCreate,
    StatusChange,
    Student,
    StudentUpdate,
)
from uniplace.data.models.base import utc_now
from uniplace.services import PlacementService
from uniplace.utils.constants import ApplicationStatus, NotificationType, PostingStatus


def _oid(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


class InMemoryRepository:
    """Dict-backed store keyed by ObjectId; hands out copies like a database would."""

    def __init__(self) -> None:
        self._items: dict[ObjectId, Any] = {}
        self._lock = threading.RLock()

    def add(self, model: Any) -> Any:
        with self._lock:
            if model.id is None:
                model.id = ObjectId()
            self._items[model.id] = model.model_copy(deep=True)
        return model

    def create(self, model: Any) -> Any:
        return self.add(model)

    def get_by_id(self, id_value: Any) -> Optional[Any]:
        key = _oid(id_value)
        with self._lock:
            item = self._items.get(key) if key is not None else None
            return item.model_copy(deep=True) if item is not None else None

    def all(self) -> list[Any]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._items.values()]


class FakeStudentRepository(InMemoryRepository):
    def update_profile(self, student_id: Any, update: StudentUpdate) -> Optional[Student]:
        key = _oid(student_id)
        with self._lock:
            student = self._items.get(key)
            if student is None:
                return None
            for field, value in update.model_dump(exclude_unset=True).items():
                setattr(student, field, value)
            student.updated_at = utc_now()
            return student.model_copy(deep=True)


class FakePostingRepository(InMemoryRepository):
    def create_from_schema(
        self, company_id: Any, company_name: str, posting_data: PostingCreate
    ) -> Posting:
        posting = Posting(
            company_id=_oid(company_id),
            company_name=company_name,
            **posting_data.model_dump(),
        )
        return self.add(posting)

    def get_active(self, skip: int = 0, limit: int = 100) -> list[Posting]:
        active = [p for p in self.all() if p.status == PostingStatus.ACTIVE.value]
        active.sort(key=lambda p: p.posted_date, reverse=True)
        return active[skip:skip + limit]

    def get_by_company(self, company_id: Any, skip: int = 0, limit: int = 100) -> list[Posting]:
        found = [p for p in self.all() if p.company_id == _oid(company_id)]
        found.sort(key=lambda p: p.posted_date, reverse=True)
        return found[skip:skip + limit]

    def mark_stopped(self, posting_id: Any) -> Optional[Posting]:
        key = _oid(posting_id)
        with self._lock:
            posting = self._items.get(key)
            if posting is None or posting.status != PostingStatus.ACTIVE.value:
                return None
            posting.status = PostingStatus.STOPPED.value
            posting.updated_at = utc_now()
            return posting.model_copy(deep=True)


class FakeApplicationRepository(InMemoryRepository):
    def insert_if_absent(self, application: Application) -> Optional[Application]:
        with self._lock:
            for existing in self._items.values():
                if (
                    existing.posting_id == application.posting_id
                    and existing.student_id == application.student_id
                ):
                    return None
            return self.add(application)

    def record_transition(self, application_id: Any, change: StatusChange) -> Optional[Application]:
        key = _oid(application_id)
        with self._lock:
            application = self._items.get(key)
            if application is None:
                return None
            application.status = change.to_status
            if change.feedback is not None:
                application.feedback = change.feedback
            application.status_history.append(change)
            application.updated_at = utc_now()
            return application.model_copy(deep=True)

    def get_by_posting_and_student(self, posting_id: Any, student_id: Any) -> Optional[Application]:
        for application in self.all():
            if application.posting_id == _oid(posting_id) and application.student_id == _oid(student_id):
                return application
        return None

    def get_by_student(self, student_id: Any, skip: int = 0, limit: int = 100) -> list[Application]:
        return [a for a in self.all() if a.student_id == _oid(student_id)][skip:skip + limit]

    def get_by_posting(
        self, posting_id: Any, status: Any = None, skip: int = 0, limit: int = 100
    ) -> list[Application]:
        found = [a for a in self.all() if a.posting_id == _oid(posting_id)]
        if status is not None:
            wanted = ApplicationStatus(status).value
            found = [a for a in found if a.status == wanted]
        return found[skip:skip + limit]


class FakeNotificationRepository(InMemoryRepository):
    def enqueue(
        self, user_id: Any, message: str, type: NotificationType = NotificationType.INFO
    ) -> Notification:
        with self._lock:
            return self.add(Notification(user_id=_oid(user_id), message=message, type=type))

    def get_for_user(self, user_id: Any, unread_only: bool = False, limit: int = 50) -> list[Notification]:
        found = [n for n in self.all() if n.user_id == _oid(user_id)]
        if unread_only:
            found = [n for n in found if not n.read]
        found.sort(key=lambda n: n.created_at, reverse=True)
        return found[:limit]

    def count_unread(self, user_id: Any) -> int:
        return len(self.get_for_user(user_id, unread_only=True, limit=10_000))

    def mark_read(self, notification_id: Any, user_id: Any) -> bool:
        item = self._items.get(_oid(notification_id))
        if item is None or item.user_id != _oid(user_id):
            return False
        item.read = True
        return True

    def mark_all_read(self, user_id: Any) -> int:
        changed = 0
        for item in self._items.values():
            if item.user_id == _oid(user_id) and not item.read:
                item.read = True
                changed += 1
        return changed


class RecordingDispatcher:
    """Synchronous dispatcher double that keeps every notice it is given."""

    def __init__(self) -> None:
        self.sent: list[tuple[Any, str, Any]] = []

    def notify(self, user_id: Any, message: str, type: Any = NotificationType.INFO) -> None:
        self.sent.append((user_id, message, type))

    def drain(self, timeout: Optional[float] = None) -> bool:
        return True

    def shutdown(self, wait: bool = True) -> None:
        pass


# ---------------------------------------------------------------------------
# Factory fixtures for models
# ---------------------------------------------------------------------------


@pytest.fixture
def make_student():
    """Factory that returns a callable to build Student models."""

    def _factory(**overrides: Any) -> Student:
        defaults: dict[str, Any] = {
            "id": ObjectId(),
            "name": "Asha Rao",
            "email": "asha@campus.edu",
            "roll_number": "21CS042",
            "branch": "B.Tech CSE",
            "course": "B.Tech",
            "graduation_year": 2025,
            "cgpa": 8.2,
            "resume_ref": "resumes/asha.pdf",
        }
        defaults.update(overrides)
        return Student(**defaults)

    return _factory


@pytest.fixture
def make_posting():
    """Factory that returns a callable to build Posting models."""

    def _factory(**overrides: Any) -> Posting:
        defaults: dict[str, Any] = {
            "id": ObjectId(),
            "company_id": ObjectId(),
            "company_name": "Acme Systems",
            "title": "Backend Engineer",
            "min_cgpa": 7.0,
            "eligible_branches": ["Computer Science"],
            "deadline": utc_now() + timedelta(days=14),
        }
        defaults.update(overrides)
        return Posting(**defaults)

    return _factory


@pytest.fixture
def sample_posting_create():
    return PostingCreate(
        title="Data Analyst Intern",
        description="Work with the analytics team.",
        min_cgpa=6.5,
        eligible_branches=["Computer Science", "IT", " "],
        deadline=datetime(2030, 1, 31),
    )


# ---------------------------------------------------------------------------
# Wired engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def student_repo():
    return FakeStudentRepository()


@pytest.fixture
def posting_repo():
    return FakePostingRepository()


@pytest.fixture
def application_repo():
    return FakeApplicationRepository()


@pytest.fixture
def notification_repo():
    return FakeNotificationRepository()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def admin_id():
    return str(ObjectId())


@pytest.fixture
def authorizer(posting_repo, admin_id):
    return Authorizer(posting_repo, admin_ids=[admin_id])


@pytest.fixture
def lifecycle(student_repo, posting_repo, application_repo, dispatcher, authorizer):
    return ApplicationLifecycleManager(
        students=student_repo,
        postings=posting_repo,
        applications=application_repo,
        dispatcher=dispatcher,
        authorizer=authorizer,
        evaluator=EligibilityEvaluator(),
        require_resume=False,
        enforce_deadline=False,
        enforce_transitions=False,
    )


@pytest.fixture
def placement_service(
    student_repo, posting_repo, application_repo, notification_repo, dispatcher, authorizer, lifecycle
):
    return PlacementService(
        students=student_repo,
        postings=posting_repo,
        applications=application_repo,
        notifications=notification_repo,
        dispatcher=dispatcher,
        authorizer=authorizer,
        lifecycle=lifecycle,
    )


@pytest.fixture
def threaded_dispatcher(notification_repo):
    """Real thread-pool dispatcher writing to the in-memory notification store."""
    dispatcher = NotificationDispatcher(notification_repo, max_workers=2, enabled=True)
    yield dispatcher
    dispatcher.shutdown(wait=True)
