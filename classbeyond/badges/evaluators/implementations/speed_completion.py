"""Speed Completion Evaluator"""

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import QUIZ_SUBMITTED, EventContext
from classbeyond.badges.evaluators.registry import register_evaluator
from classbeyond.badges.stats import ActivityStats
from classbeyond.badges.schemas.badge import SpeedCompletionRequirement


@register_evaluator("speed_completion")
class SpeedCompletionEvaluator(BaseEvaluator):
    """One-shot award: this submission alone must be fast enough and score
    exactly `min_score`. There is no running counter.
    Configuration:
        value: Maximum completion time in seconds (inclusive)
        min_score: Required percentage
    """

    requirement_class = SpeedCompletionRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [QUIZ_SUBMITTED]

    def applies_to(self, context: EventContext) -> bool:
        return (
            context.completion_time_seconds is not None
            and context.completion_time_seconds <= self.requirement.value
            and context.scores_exactly(self.requirement.min_score)
        )

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        # only reached through applies_to, the award is immediate
        return self.threshold
