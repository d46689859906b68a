"""Badge Awarding Service"""

import logging
from collections import defaultdict
from datetime import UTC, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from classbeyond.badges.definitions.catalog import BadgeCatalog
from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import (
    FORUM_POST_CREATED,
    FORUM_REPLY_CREATED,
    LESSON_COMPLETED,
    LOGIN,
    MENTOR_SESSION_COMPLETED,
    QUIZ_SUBMITTED,
    EventContext,
)
from classbeyond.badges.evaluators.registry import create_evaluator
from classbeyond.badges.schemas.badge import BadgeDefinition, StudentBadgeView
from classbeyond.badges.stats import ActivityStats
from classbeyond.config import settings
from classbeyond.core.data.models import Quiz
from classbeyond.core.data.repositories import StudentBadgeRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BadgeService:
    """Evaluates student activity against the badge catalog and awards badges.

    Awarding is best effort: every public `check_*` method returns the list of
    badges newly earned by that call and returns an empty list instead of
    raising when storage fails, so the action that triggered it still succeeds.
    """

    def __init__(
        self,
        catalog: BadgeCatalog,
        clock: Callable[[], datetime] = _utcnow,
        tz: ZoneInfo | None = None,
    ):
        self.catalog = catalog
        self.clock = clock
        self.tz = tz or settings.tzinfo
        self._evaluators = self._build_evaluators(catalog)

    @staticmethod
    def _build_evaluators(catalog: BadgeCatalog) -> dict[str, list[BaseEvaluator]]:
        """One evaluator per badge, grouped by requirement type.
        Badges without a usable evaluator are warned about here, once.
        """
        evaluators: dict[str, list[BaseEvaluator]] = defaultdict(list)
        for badge in catalog:
            evaluator = create_evaluator(badge)
            if evaluator is None:
                continue
            evaluators[badge.requirement_type].append(evaluator)
        return dict(evaluators)

    def _now_local(self) -> datetime:
        return self.clock().astimezone(self.tz)

    def evaluate_event(self, context: EventContext, db: Session) -> list[BadgeDefinition]:
        """
        Run every evaluator relevant to the event and update the ledger.

        A failure while evaluating one requirement type is logged and rolled
        back without stopping the other requirement types.
        """
        stats = ActivityStats(db, context.student_id, self.tz)
        ledger = StudentBadgeRepository(db)
        newly_earned: list[BadgeDefinition] = []

        for requirement_type, evaluators in self._evaluators.items():
            relevant = [
                evaluator
                for evaluator in evaluators
                if evaluator.matches_event_type(context.event_type)
                and evaluator.applies_to(context)
            ]
            if not relevant:
                continue

            try:
                for evaluator in relevant:
                    result = evaluator.evaluate(context, stats)
                    update = ledger.upsert_progress(
                        context.student_id,
                        evaluator.badge.id,
                        result.progress,
                        result.threshold,
                        now=self.clock().astimezone(UTC),
                    )
                    logger.debug("%s (student %s)", result.message, context.student_id)
                    if update.newly_earned:
                        newly_earned.append(evaluator.badge)
                        logger.info(
                            "Badge awarded: %s to student %s",
                            evaluator.badge.name,
                            context.student_id,
                        )
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.error(
                    "Error evaluating %s badges for student %s: %s",
                    requirement_type,
                    context.student_id,
                    e,
                )
                db.rollback()

        return newly_earned

    def _check(self, db: Session, context_factory: Callable[[], EventContext]):
        try:
            return self.evaluate_event(context_factory(), db)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error checking badges: %s", e)
            db.rollback()
            return []

    def check_and_award_badges_for_quiz(
        self,
        db: Session,
        student_id: str,
        quiz_id: str,
        score: int,
        total_questions: int,
        completion_time_seconds: int | None,
    ) -> list[BadgeDefinition]:
        """Call after a quiz submission has been persisted"""

        def build_context() -> EventContext:
            quiz = db.get(Quiz, quiz_id)
            if quiz is None:
                logger.warning("Quiz %s not found, subject badges skipped", quiz_id)
            return EventContext(
                student_id=student_id,
                event_type=QUIZ_SUBMITTED,
                occurred_at=self._now_local(),
                quiz_id=quiz_id,
                subject=quiz.subject if quiz else None,
                score=score,
                total_questions=total_questions,
                completion_time_seconds=completion_time_seconds,
            )

        return self._check(db, build_context)

    def check_lesson_badges(self, db: Session, student_id: str) -> list[BadgeDefinition]:
        """Call after a lesson completion has been persisted"""
        return self._check(db, lambda: self._simple_context(student_id, LESSON_COMPLETED))

    def check_login_badges(self, db: Session, student_id: str) -> list[BadgeDefinition]:
        return self._check(db, lambda: self._simple_context(student_id, LOGIN))

    def check_forum_badges(
        self, db: Session, student_id: str, is_reply: bool = False
    ) -> list[BadgeDefinition]:
        event_type = FORUM_REPLY_CREATED if is_reply else FORUM_POST_CREATED
        return self._check(db, lambda: self._simple_context(student_id, event_type))

    def check_mentor_session_badges(
        self, db: Session, student_id: str
    ) -> list[BadgeDefinition]:
        return self._check(
            db, lambda: self._simple_context(student_id, MENTOR_SESSION_COMPLETED)
        )

    def _simple_context(self, student_id: str, event_type: str) -> EventContext:
        return EventContext(
            student_id=student_id, event_type=event_type, occurred_at=self._now_local()
        )

    def get_student_badges(self, db: Session, student_id: str) -> list[StudentBadgeView]:
        """Every catalog badge with the student's progress, unearned ones at 0"""
        return StudentBadgeRepository(db).get_all_for_student(student_id, self.catalog)
