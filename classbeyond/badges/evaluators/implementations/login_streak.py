"""Login Streak Evaluator"""

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import LOGIN, EventContext
from classbeyond.badges.evaluators.registry import register_evaluator
from classbeyond.badges.stats import ActivityStats
from classbeyond.badges.schemas.badge import LoginStreakRequirement


@register_evaluator("login_streak")
class LoginStreakEvaluator(BaseEvaluator):
    """Awards badges for logging in on consecutive local days.
    Progress follows the current streak, so it drops back when a streak breaks.
    """

    requirement_class = LoginStreakRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [LOGIN]

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.login_streak(context.local_date)
