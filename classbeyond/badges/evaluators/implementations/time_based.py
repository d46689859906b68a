"""Time of Day Evaluator"""

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import QUIZ_SUBMITTED, EventContext
from classbeyond.badges.evaluators.registry import register_evaluator
from classbeyond.badges.stats import ActivityStats
from classbeyond.badges.schemas.badge import TimeBasedRequirement


@register_evaluator("time_based")
class TimeBasedEvaluator(BaseEvaluator):
    """Awards badges for quizzes submitted inside a local hour window
    Configuration:
        start_hour: First hour inside the window
        end_hour: First hour after the window, may be smaller than start_hour
    """

    requirement_class = TimeBasedRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [QUIZ_SUBMITTED]

    def applies_to(self, context: EventContext) -> bool:
        return self.requirement.contains_hour(context.local_hour)

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.submissions_in_hours(self.requirement.contains_hour)
