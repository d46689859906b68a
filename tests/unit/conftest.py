"""
Unit test configuration.
"""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from classbeyond.badges.definitions import BadgeCatalog, initialize_badges, load_definitions
from classbeyond.badges.processor import BadgeService
from classbeyond.core.data.database import Base, get_db
from classbeyond.core.data.models import Lesson, Quiz, User
from classbeyond.core.data.repositories import StudentActivityRepository
from classbeyond.core.email import BadgeNotification, EmailService, get_email_service
from classbeyond.main import app

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# A Wednesday at noon: outside every time window and not a weekend
FIXED_NOW = datetime(2024, 3, 13, 12, 0, tzinfo=UTC)

SUBJECTS = ["Math", "Science", "English", "History", "Art"]


class FakeClock:
    """Settable clock handed to the badge service"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingEmailService(EmailService):
    """Collects notifications instead of sending them"""

    def __init__(self):
        self.sent: list[BadgeNotification] = []

    async def send_badge_earned(self, notification: BadgeNotification) -> bool:
        self.sent.append(notification)
        return True


@pytest.fixture(scope="function")
def engine():
    """Create test database engine with fresh tables each time"""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Ensures the same connection is used
    )
    return engine


@pytest.fixture(scope="function")
def db(engine, monkeypatch):
    """Database session with automatic cleanup between tests

    This fixture:
    1. Creates all tables on a fresh in-memory database
    2. Patches SessionLocal so app startup uses the test database
    3. Yields a clean session for the test
    4. Drops all tables after the test completes
    """
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    monkeypatch.setattr("classbeyond.core.data.database.SessionLocal", TestSessionLocal)

    session = TestSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def definitions():
    return load_definitions()


@pytest.fixture
def catalog(db, definitions):
    """Seeded badge catalog snapshot"""
    initialize_badges(db, definitions)
    return BadgeCatalog.from_db(db, version=definitions.version)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(catalog, clock):
    return BadgeService(catalog, clock=clock, tz=ZoneInfo("UTC"))


@pytest.fixture
def student(db):
    user = User(id="student-1", email="ada@example.com", first_name="Ada")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def quizzes(db):
    """One lesson and one quiz per subject, keyed by subject"""
    result = {}
    for subject in SUBJECTS:
        lesson = Lesson(id=f"lesson-{subject.lower()}", title=f"{subject} 101", subject=subject)
        quiz = Quiz(
            id=f"quiz-{subject.lower()}",
            lesson_id=lesson.id,
            title=f"{subject} check-in",
            subject=subject,
        )
        db.add_all([lesson, quiz])
        result[subject] = quiz.id
    db.commit()
    return result


@pytest.fixture
def take_quiz(db, service, clock, student, quizzes):
    """Persist a submission at the clock's time and run badge evaluation"""

    def _take_quiz(subject="Art", score=6, total=10, seconds=None, student_id=None):
        student_id = student_id or student.id
        StudentActivityRepository(db, student_id).record_quiz_submission(
            quiz_id=quizzes[subject],
            score=score,
            total_questions=total,
            completion_time_seconds=seconds,
            submitted_at=clock(),
        )
        earned = service.check_and_award_badges_for_quiz(
            db, student_id, quizzes[subject], score, total, seconds
        )
        return {badge.name for badge in earned}

    return _take_quiz


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def client(db, service, email_service):
    """Test client sharing the test session, fixed clock and recording email"""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service
    with TestClient(app) as test_client:
        app.state.badge_service = service
        yield test_client
    app.dependency_overrides.clear()
