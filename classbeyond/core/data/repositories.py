"""Data Repositories for ClassBeyond"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classbeyond.badges.schemas.badge import BadgeDefinition, StudentBadgeView
from classbeyond.core.data.models import (
    Badge,
    ForumAnswer,
    ForumQuestion,
    LessonProgress,
    LoginEvent,
    MentorshipSession,
    QuizSubmission,
    StudentBadge,
    as_utc,
    utcnow,
)

logger = logging.getLogger(__name__)


class BadgeRepository:
    """Repository for the badge catalog table"""

    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        return self.db.query(func.count(Badge.id)).scalar() or 0

    def list_badges(
        self, badge_type: str | None = None, rarity: str | None = None
    ) -> list[Badge]:
        query = self.db.query(Badge)
        if badge_type:
            query = query.filter(Badge.type == badge_type)
        if rarity:
            query = query.filter(Badge.rarity == rarity)
        return query.order_by(Badge.id).all()

    def get_by_name(self, name: str) -> Badge | None:
        return self.db.query(Badge).filter(Badge.name == name).first()

    def bulk_insert(self, definitions: list[dict]) -> int:
        """Insert badge rows in a single flush, caller commits"""
        rows = [
            Badge(
                name=definition["name"],
                description=definition["description"],
                type=definition["type"],
                rarity=definition["rarity"],
                icon=definition["icon"],
                points=definition["points"],
                requirement=json.dumps(definition["requirement"]),
            )
            for definition in definitions
        ]
        self.db.add_all(rows)
        self.db.flush()
        return len(rows)


@dataclass
class ProgressUpdate:
    """Outcome of a single ledger upsert"""

    record: StudentBadge
    newly_earned: bool


class StudentBadgeRepository:
    """Progress ledger: one row per student x badge, earned at most once"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, student_id: str, badge_id: int) -> StudentBadge | None:
        return (
            self.db.query(StudentBadge)
            .filter(
                StudentBadge.student_id == student_id,
                StudentBadge.badge_id == badge_id,
            )
            .first()
        )

    def list_for_student(self, student_id: str) -> list[StudentBadge]:
        return (
            self.db.query(StudentBadge)
            .filter(StudentBadge.student_id == student_id)
            .all()
        )

    def get_all_for_student(
        self, student_id: str, badges: Iterable[BadgeDefinition]
    ) -> list[StudentBadgeView]:
        """Join the catalog with the student's rows, missing rows report progress 0"""
        rows = {row.badge_id: row for row in self.list_for_student(student_id)}
        result = []
        for badge in badges:
            row = rows.get(badge.id)
            result.append(
                StudentBadgeView(
                    **badge.model_dump(exclude={"requirement"}),
                    requirement=badge.requirement.model_dump(),
                    progress=row.progress if row else 0,
                    earned_at=as_utc(row.earned_at) if row else None,
                    is_earned=bool(row and row.earned_at),
                )
            )
        return result

    def list_earned(self, student_id: str) -> list[StudentBadge]:
        return (
            self.db.query(StudentBadge)
            .filter(
                StudentBadge.student_id == student_id,
                StudentBadge.earned_at.is_not(None),
            )
            .order_by(StudentBadge.earned_at)
            .all()
        )

    def total_points(self, student_id: str) -> int:
        total = (
            self.db.query(func.coalesce(func.sum(Badge.points), 0))
            .join(StudentBadge, StudentBadge.badge_id == Badge.id)
            .filter(
                StudentBadge.student_id == student_id,
                StudentBadge.earned_at.is_not(None),
            )
            .scalar()
        )
        return int(total or 0)

    def upsert_progress(
        self,
        student_id: str,
        badge_id: int,
        new_progress: int,
        threshold: int,
        now: datetime | None = None,
    ) -> ProgressUpdate:
        """Create or refresh the progress row and award it once.

        The award is a conditional UPDATE guarded by `earned_at IS NULL`, so of
        any number of concurrent callers crossing the threshold exactly one
        sees a rowcount of 1 and reports the badge as newly earned.
        """
        self._insert_if_missing(student_id, badge_id)

        match_row = (
            StudentBadge.student_id == student_id,
            StudentBadge.badge_id == badge_id,
        )
        newly_earned = False
        if new_progress >= threshold:
            result = self.db.execute(
                update(StudentBadge)
                .where(*match_row, StudentBadge.earned_at.is_(None))
                .values(progress=new_progress, earned_at=now or utcnow())
                .execution_options(synchronize_session=False)
            )
            newly_earned = result.rowcount == 1

        if not newly_earned:
            # earned_at is never touched here, an earned badge stays earned
            self.db.execute(
                update(StudentBadge)
                .where(*match_row)
                .values(progress=new_progress)
                .execution_options(synchronize_session=False)
            )

        self.db.commit()
        record = self.db.execute(
            select(StudentBadge).where(*match_row)
        ).scalar_one()
        return ProgressUpdate(record=record, newly_earned=newly_earned)

    def _insert_if_missing(self, student_id: str, badge_id: int) -> None:
        """Dialect-agnostic INSERT ... ON CONFLICT DO NOTHING"""
        values = {
            "student_id": student_id,
            "badge_id": badge_id,
            "progress": 0,
            "created_at": utcnow(),
            "updated_at": utcnow(),
        }
        dialect = self.db.bind.dialect.name if self.db.bind else "sqlite"

        if dialect == "sqlite":
            stmt = sqlite_insert(StudentBadge).values(**values)
        elif dialect == "postgresql":
            stmt = pg_insert(StudentBadge).values(**values)
        else:
            if self.get(student_id, badge_id) is not None:
                return
            try:
                with self.db.begin_nested():
                    self.db.add(StudentBadge(**values))
            except IntegrityError:
                logger.debug(
                    "Progress row for %s/%s created concurrently", student_id, badge_id
                )
            return

        stmt = stmt.on_conflict_do_nothing(index_elements=["student_id", "badge_id"])
        self.db.execute(stmt)


class StudentScopedRepository:
    """Base Repository for queries and writes scoped to one student"""

    def __init__(self, db: Session, student_id: str):
        self.db = db
        self.student_id = student_id

    def _add_student_filter(self, query, column):
        """Add student filter to a query"""
        return query.filter(column == self.student_id)


class StudentActivityRepository(StudentScopedRepository):
    """Records the activity that badges are computed from"""

    def record_quiz_submission(
        self,
        quiz_id: str,
        score: int,
        total_questions: int,
        completion_time_seconds: int | None = None,
        submitted_at: datetime | None = None,
    ) -> QuizSubmission:
        submission = QuizSubmission(
            quiz_id=quiz_id,
            student_id=self.student_id,
            score=score,
            total_questions=total_questions,
            completion_time_seconds=completion_time_seconds,
            submitted_at=as_utc(submitted_at) or utcnow(),
        )
        self.db.add(submission)
        self.db.commit()
        self.db.refresh(submission)
        return submission

    def complete_lesson(
        self, lesson_id: str, completed_at: datetime | None = None
    ) -> LessonProgress:
        """Mark a lesson complete, the first completion time is kept"""
        progress = self._add_student_filter(
            self.db.query(LessonProgress), LessonProgress.student_id
        ).filter(LessonProgress.lesson_id == lesson_id).first()
        now = as_utc(completed_at) or utcnow()

        if progress is None:
            progress = LessonProgress(
                student_id=self.student_id, lesson_id=lesson_id
            )
            self.db.add(progress)

        if not progress.completed:
            progress.completed = True
            progress.completed_at = now
        progress.last_accessed_at = now

        self.db.commit()
        self.db.refresh(progress)
        return progress

    def record_login(self, logged_in_at: datetime | None = None) -> LoginEvent:
        login = LoginEvent(
            student_id=self.student_id, logged_in_at=as_utc(logged_in_at) or utcnow()
        )
        self.db.add(login)
        self.db.commit()
        self.db.refresh(login)
        return login

    def create_forum_post(
        self, title: str, body: str, subject: str | None = None
    ) -> ForumQuestion:
        post = ForumQuestion(
            author_id=self.student_id, title=title, body=body, subject=subject
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        return post

    def create_forum_reply(self, question_id: int, body: str) -> ForumAnswer | None:
        if self.db.get(ForumQuestion, question_id) is None:
            return None
        reply = ForumAnswer(
            question_id=question_id, author_id=self.student_id, body=body
        )
        self.db.add(reply)
        self.db.commit()
        self.db.refresh(reply)
        return reply

    def complete_mentorship_session(self, session_id: int) -> MentorshipSession | None:
        session = self._add_student_filter(
            self.db.query(MentorshipSession), MentorshipSession.student_id
        ).filter(MentorshipSession.id == session_id).first()
        if session is None:
            return None
        if session.status == "cancelled":
            raise ValueError("Cancelled sessions cannot be completed")
        session.status = "completed"
        self.db.commit()
        self.db.refresh(session)
        return session
