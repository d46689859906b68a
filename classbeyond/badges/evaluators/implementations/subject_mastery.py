"""Subject Mastery Evaluator"""

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import QUIZ_SUBMITTED, EventContext
from classbeyond.badges.evaluators.registry import register_evaluator
from classbeyond.badges.stats import ActivityStats
from classbeyond.badges.schemas.badge import SubjectMasteryRequirement


@register_evaluator("subject_mastery")
class SubjectMasteryEvaluator(BaseEvaluator):
    """Awards badges for repeated high scores in one subject
    Configuration:
        subject: Quiz subject, compared case-insensitively
        min_score: Minimum percentage for a submission to count
    """

    requirement_class = SubjectMasteryRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [QUIZ_SUBMITTED]

    def applies_to(self, context: EventContext) -> bool:
        return self.requirement.matches_subject(
            context.subject
        ) and context.scores_at_least(self.requirement.min_score)

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.subject_mastery_count(
            self.requirement.subject, self.requirement.min_score
        )
