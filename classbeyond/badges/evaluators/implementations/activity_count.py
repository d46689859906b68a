"""Lifetime Activity Count Evaluators

Each badge here compares a single lifetime counter against its threshold.
"""

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import (
    FORUM_POST_CREATED,
    FORUM_REPLY_CREATED,
    LESSON_COMPLETED,
    MENTOR_SESSION_COMPLETED,
    QUIZ_SUBMITTED,
    EventContext,
)
from classbeyond.badges.evaluators.registry import register_evaluator
from classbeyond.badges.stats import ActivityStats
from classbeyond.badges.schemas.badge import (
    ForumPostsRequirement,
    ForumRepliesRequirement,
    LessonCountRequirement,
    MentorSessionsRequirement,
    PerfectScoreRequirement,
    QuizCountRequirement,
)


@register_evaluator("quiz_count")
class QuizCountEvaluator(BaseEvaluator):
    """Awards badges based on total quiz submissions"""

    requirement_class = QuizCountRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [QUIZ_SUBMITTED]

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.quiz_count


@register_evaluator("perfect_score")
class PerfectScoreEvaluator(BaseEvaluator):
    """Awards badges based on submissions scoring 100%.
    Only a perfect submission can move this counter, others are skipped.
    """

    requirement_class = PerfectScoreRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [QUIZ_SUBMITTED]

    def applies_to(self, context: EventContext) -> bool:
        return context.is_perfect

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.perfect_score_count


@register_evaluator("lesson_count")
class LessonCountEvaluator(BaseEvaluator):
    """Awards badges based on completed lessons"""

    requirement_class = LessonCountRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [LESSON_COMPLETED]

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.completed_lesson_count


@register_evaluator("forum_posts")
class ForumPostsEvaluator(BaseEvaluator):
    requirement_class = ForumPostsRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [FORUM_POST_CREATED]

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.forum_post_count


@register_evaluator("forum_replies")
class ForumRepliesEvaluator(BaseEvaluator):
    requirement_class = ForumRepliesRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [FORUM_REPLY_CREATED]

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.forum_reply_count


@register_evaluator("mentor_sessions")
class MentorSessionsEvaluator(BaseEvaluator):
    """Awards badges based on attended (completed) mentorship sessions"""

    requirement_class = MentorSessionsRequirement

    def get_relevant_event_types(self) -> list[str]:
        return [MENTOR_SESSION_COMPLETED]

    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        return stats.completed_mentor_session_count
