"""ClassBeyond Data Models"""

import json
import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from classbeyond.core.data.database import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize to aware UTC, naive values are stored UTC (SQLite drops tzinfo)"""
    if value is None:
        return None
    return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)


def isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat().replace("+00:00", "Z")


# General Models
class User(Base):
    """User Model
    - Identity is owned by the external identity provider, this is the local profile
    """

    __tablename__ = "users"

    id = Column[str](String(64), primary_key=True, default=new_id)
    email = Column[str](String(255), unique=True, nullable=True, index=True)
    first_name = Column[str](String(100), nullable=True)
    last_name = Column[str](String(100), nullable=True)
    role = Column[str](String(20), nullable=False, default="student")

    created_at = Column[datetime](DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', role='{self.role}')>"

    @property
    def display_name(self) -> str:
        return self.first_name or (self.email.split("@")[0] if self.email else "Student")


# Learning content
class Lesson(Base):
    """Lesson Model"""

    __tablename__ = "lessons"

    id = Column[str](String(64), primary_key=True, default=new_id)
    title = Column[str](String(255), nullable=False)
    subject = Column[str](String(50), nullable=False)
    created_at = Column[datetime](DateTime, default=utcnow)

    quizzes = relationship("Quiz", back_populates="lesson")


class Quiz(Base):
    """Quiz Model"""

    __tablename__ = "quizzes"

    id = Column[str](String(64), primary_key=True, default=new_id)
    lesson_id = Column[str](String(64), ForeignKey("lessons.id"), nullable=True)
    title = Column[str](String(255), nullable=False)
    subject = Column[str](String(50), nullable=False)  # e.g. "Math", "Science"
    created_at = Column[datetime](DateTime, default=utcnow)

    lesson = relationship("Lesson", back_populates="quizzes")
    submissions = relationship("QuizSubmission", back_populates="quiz")

    def __repr__(self) -> str:
        return f"<Quiz(id='{self.id}', subject='{self.subject}')>"


# Student activity
class QuizSubmission(Base):
    """A student's graded quiz attempt"""

    __tablename__ = "quiz_submissions"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    quiz_id = Column[str](String(64), ForeignKey("quizzes.id"), nullable=False)
    student_id = Column[str](String(64), nullable=False, index=True)
    score = Column[int](Integer, nullable=False)
    total_questions = Column[int](Integer, nullable=False)
    completion_time_seconds = Column[int](Integer, nullable=True)
    submitted_at = Column[datetime](DateTime, default=utcnow, nullable=False)

    quiz = relationship("Quiz", back_populates="submissions")

    __table_args__ = (
        Index("idx_qs_student_submitted", "student_id", "submitted_at"),
    )

    @property
    def percentage(self) -> float:
        if not self.total_questions:
            return 0.0
        return self.score / self.total_questions * 100

    def to_dict(self) -> dict:
        """Convert submission to dictionary"""
        return {
            "id": self.id,
            "quiz_id": self.quiz_id,
            "student_id": self.student_id,
            "score": self.score,
            "total_questions": self.total_questions,
            "percentage": round(self.percentage, 2),
            "completion_time_seconds": self.completion_time_seconds,
            "submitted_at": isoformat(self.submitted_at),
        }


class LessonProgress(Base):
    """Tracks each student's progress on each lesson"""

    __tablename__ = "lesson_progress"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    student_id = Column[str](String(64), nullable=False, index=True)
    lesson_id = Column[str](String(64), ForeignKey("lessons.id"), nullable=False)
    completed = Column[bool](Boolean, default=False, nullable=False)
    completed_at = Column[datetime](DateTime, nullable=True)
    last_accessed_at = Column[datetime](DateTime, default=utcnow)

    __table_args__ = (
        Index("idx_lp_student_completed", "student_id", "completed"),
        UniqueConstraint("student_id", "lesson_id", name="uq_student_lesson"),
    )

    def to_dict(self) -> dict:
        """Convert progress to dictionary"""
        return {
            "id": self.id,
            "student_id": self.student_id,
            "lesson_id": self.lesson_id,
            "completed": self.completed,
            "completed_at": isoformat(self.completed_at),
            "last_accessed_at": isoformat(self.last_accessed_at),
        }


class LoginEvent(Base):
    """One row per successful login, used for streaks"""

    __tablename__ = "login_events"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    student_id = Column[str](String(64), nullable=False, index=True)
    logged_in_at = Column[datetime](DateTime, default=utcnow, nullable=False)


class ForumQuestion(Base):
    """Forum post"""

    __tablename__ = "forum_questions"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    author_id = Column[str](String(64), nullable=False, index=True)
    title = Column[str](String(255), nullable=False)
    body = Column[str](Text, nullable=False)
    subject = Column[str](String(50), nullable=True)
    created_at = Column[datetime](DateTime, default=utcnow, nullable=False)

    answers = relationship("ForumAnswer", back_populates="question")


class ForumAnswer(Base):
    """Forum reply"""

    __tablename__ = "forum_answers"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    question_id = Column[int](Integer, ForeignKey("forum_questions.id"), nullable=False)
    author_id = Column[str](String(64), nullable=False, index=True)
    body = Column[str](Text, nullable=False)
    created_at = Column[datetime](DateTime, default=utcnow, nullable=False)

    question = relationship("ForumQuestion", back_populates="answers")


class MentorshipSession(Base):
    """Mentorship session between a student and a mentor"""

    __tablename__ = "mentorship_sessions"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    student_id = Column[str](String(64), nullable=False, index=True)
    mentor_id = Column[str](String(64), nullable=True)  # Nullable until mentor accepts
    subject = Column[str](String(50), nullable=False)
    # status: "requested", "pending", "approved", "scheduled", "completed", "cancelled"
    status = Column[str](String(20), nullable=False, default="requested")
    scheduled_at = Column[datetime](DateTime, nullable=True)
    created_at = Column[datetime](DateTime, default=utcnow)
    updated_at = Column[datetime](DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_ms_student_status", "student_id", "status"),
    )


# Badges
class Badge(Base):
    """Badge Definition - seeded from badges.yaml"""

    __tablename__ = "badges"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    name = Column[str](String(100), unique=True, nullable=False)
    description = Column[str](Text, nullable=False)
    type = Column[str](
        String(20), nullable=False
    )  # "achievement", "streak", "participation", "mastery", "special"
    rarity = Column[str](
        String(20), default="common"
    )  # "common", "rare", "epic", "legendary"
    icon = Column[str](String(16), nullable=False)
    points = Column[int](Integer, default=10)
    requirement = Column[str](Text, nullable=False)  # JSON: tagged requirement
    created_at = Column[datetime](DateTime, default=utcnow)

    student_badges = relationship("StudentBadge", back_populates="badge")

    __table_args__ = (
        Index("idx_badges_type", "type"),
        Index("idx_badges_rarity", "rarity"),
    )

    def __repr__(self) -> str:
        return f"<Badge(id={self.id}, name='{self.name}', rarity='{self.rarity}')>"

    def to_dict(self) -> dict:
        """Convert badge to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "rarity": self.rarity,
            "icon": self.icon,
            "points": self.points,
            "requirement": json.loads(self.requirement),
        }


class StudentBadge(Base):
    """Per-student progress toward a badge, earned once"""

    __tablename__ = "student_badges"

    id = Column[int](Integer, primary_key=True, autoincrement=True)
    student_id = Column[str](String(64), nullable=False, index=True)
    badge_id = Column[int](Integer, ForeignKey("badges.id"), nullable=False)
    progress = Column[int](Integer, default=0, nullable=False)
    earned_at = Column[datetime](DateTime, nullable=True)

    created_at = Column[datetime](DateTime, default=utcnow)
    updated_at = Column[datetime](DateTime, default=utcnow, onupdate=utcnow)

    badge = relationship("Badge", back_populates="student_badges")

    __table_args__ = (
        Index("idx_sb_student_earned", "student_id", "earned_at"),
        UniqueConstraint("student_id", "badge_id", name="uq_student_badge"),
    )

    def __repr__(self) -> str:
        return f"<StudentBadge(student_id='{self.student_id}', badge_id={self.badge_id}, progress={self.progress})>"

    @property
    def is_earned(self) -> bool:
        return self.earned_at is not None
