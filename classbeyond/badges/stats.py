"""Aggregate activity statistics for badge evaluation.

Every figure is recomputed from the activity tables on each evaluation, so
progress never depends on event order and can be rebuilt after a backfill.
"""

from datetime import date, datetime, timedelta
from functools import cached_property
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from sqlalchemy import func
from sqlalchemy.orm import Session

from classbeyond.core.data.models import (
    ForumAnswer,
    ForumQuestion,
    LessonProgress,
    LoginEvent,
    MentorshipSession,
    Quiz,
    QuizSubmission,
    as_utc,
)
from classbeyond.core.data.repositories import StudentScopedRepository


class ActivityStats(StudentScopedRepository):
    """Per-evaluation view of one student's activity.
    Lifetime counters are cached for the lifetime of the instance.
    """

    def __init__(self, db: Session, student_id: str, tz: ZoneInfo):
        super().__init__(db, student_id)
        self.tz = tz

    def _local(self, value: datetime) -> datetime:
        return as_utc(value).astimezone(self.tz)

    def _count(self, column, *criteria) -> int:
        query = self.db.query(func.count(column))
        return self._add_student_filter(query, column).filter(*criteria).scalar() or 0

    @cached_property
    def quiz_count(self) -> int:
        return self._count(QuizSubmission.student_id)

    @cached_property
    def perfect_score_count(self) -> int:
        return self._count(
            QuizSubmission.student_id,
            QuizSubmission.total_questions > 0,
            QuizSubmission.score == QuizSubmission.total_questions,
        )

    @cached_property
    def completed_lesson_count(self) -> int:
        return self._count(LessonProgress.student_id, LessonProgress.completed.is_(True))

    @cached_property
    def forum_post_count(self) -> int:
        return self._count(ForumQuestion.author_id)

    @cached_property
    def forum_reply_count(self) -> int:
        return self._count(ForumAnswer.author_id)

    @cached_property
    def completed_mentor_session_count(self) -> int:
        return self._count(
            MentorshipSession.student_id, MentorshipSession.status == "completed"
        )

    def subject_mastery_count(self, subject: str, min_score: float) -> int:
        """Submissions in `subject` (case-insensitive) scoring >= min_score percent"""
        query = (
            self.db.query(func.count(QuizSubmission.id))
            .join(Quiz, Quiz.id == QuizSubmission.quiz_id)
            .filter(
                func.lower(Quiz.subject) == subject.lower(),
                QuizSubmission.total_questions > 0,
                QuizSubmission.score * 100 >= min_score * QuizSubmission.total_questions,
            )
        )
        return self._add_student_filter(query, QuizSubmission.student_id).scalar() or 0

    @cached_property
    def _submission_times(self) -> list[datetime]:
        query = self.db.query(QuizSubmission.submitted_at)
        rows = self._add_student_filter(query, QuizSubmission.student_id).all()
        return [self._local(submitted_at) for (submitted_at,) in rows]

    @cached_property
    def _lesson_completion_times(self) -> list[datetime]:
        query = self.db.query(LessonProgress.completed_at).filter(
            LessonProgress.completed.is_(True),
            LessonProgress.completed_at.is_not(None),
        )
        rows = self._add_student_filter(query, LessonProgress.student_id).all()
        return [self._local(completed_at) for (completed_at,) in rows]

    def submissions_in_hours(self, contains_hour: Callable[[int], bool]) -> int:
        """Quiz submissions whose local hour satisfies `contains_hour`"""
        return sum(1 for moment in self._submission_times if contains_hour(moment.hour))

    @cached_property
    def weekend_activity_count(self) -> int:
        """Quiz submissions and lesson completions on a local Saturday or Sunday"""
        moments = self._submission_times + self._lesson_completion_times
        return sum(1 for moment in moments if moment.weekday() >= 5)

    def login_streak(self, as_of: date) -> int:
        """Consecutive local days with a login, ending on `as_of`.
        A streak still counts on a day without a login yet, it breaks the day after.
        """
        query = self.db.query(LoginEvent.logged_in_at)
        rows = self._add_student_filter(query, LoginEvent.student_id).all()
        days = {self._local(logged_in_at).date() for (logged_in_at,) in rows}
        return consecutive_days(days, as_of)


def consecutive_days(days: Iterable[date], as_of: date) -> int:
    day_set = set(days)
    current = as_of if as_of in day_set else as_of - timedelta(days=1)
    streak = 0
    while current in day_set:
        streak += 1
        current -= timedelta(days=1)
    return streak
