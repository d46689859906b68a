"""Weekend Activity Evaluator"""

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import (
    LESSON_COMPLETED,
    QUIZ_SUBMITTED,
    EventContext,
)
from classbeyond.badges.evaluators.registry import register_evaluator
from classbeyond.badges.stats import ActivityStats
from classbeyond.badges.schemas.badge import WeekendActivityRequirement


@register_evaluator("weekend_activity")
class WeekendActivityEvaluator(BaseEvaluator):
    """Awards badges for gradeable activity (quizzes, lessons) on Saturday or Sunday"""

    requirement_class = WeekendActivityRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [QUIZ_SUBMITTED, LESSON_COMPLETED]

    def applies_to(self, context: EventContext) -> bool:
        return context.is_weekend

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.weekend_activity_count
