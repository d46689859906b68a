"""Base Badge Evaluator"""

import logging
from abc import ABC, abstractmethod

from classbeyond.badges.evaluators.context import EvaluationResult, EventContext
from classbeyond.badges.schemas.badge import BadgeDefinition
from classbeyond.badges.stats import ActivityStats

logger = logging.getLogger(__name__)


class BaseEvaluator(ABC):
    """
    Abstract base class for badge evaluators.

    One evaluator instance is bound to one badge definition. The service asks
    it whether an event is relevant (`matches_event_type` then `applies_to`)
    and, if so, for the student's current progress toward the badge.
    """

    requirement_class: type | None = None

    def __init__(self, badge: BadgeDefinition):
        """Initialize the evaluator

        Args:
            badge: The badge definition this evaluator is associated with
        """
        self.badge = badge
        self.requirement = badge.requirement
        self._validate_config()

    def _validate_config(self) -> None:
        """Check the requirement variant matches this evaluator"""
        if self.requirement_class and not isinstance(
            self.requirement, self.requirement_class
        ):
            raise ValueError(
                f"{type(self).__name__} cannot evaluate {self.requirement.type} "
                f"requirement of badge {self.badge.name!r}"
            )

    @property
    def threshold(self) -> int:
        return self.requirement.value

    @abstractmethod
    def get_relevant_event_types(self) -> list[str]:
        """Return list of event types this evaluator cares about.
        Supports wildcards like "quiz.*".
        """

    def applies_to(self, context: EventContext) -> bool:
        """Gate on the event's own fields (score, subject, hour...).
        Default: every event of a relevant type applies.
        """
        _ = context
        return True

    @abstractmethod
    def compute_progress(self, context: EventContext, stats: ActivityStats) -> int:
        """Current progress value for the student, compared to `threshold`"""

    def evaluate(self, context: EventContext, stats: ActivityStats) -> EvaluationResult:
        progress = self.compute_progress(context, stats)
        return EvaluationResult(
            progress=progress,
            threshold=self.threshold,
            message=f"{self.badge.name}: {progress}/{self.threshold}",
        )

    def matches_event_type(self, event_type: str) -> bool:
        """Check if an event type matches this evaluator's relevant types"""
        for pattern in self.get_relevant_event_types():
            if pattern.endswith("*"):
                if event_type.startswith(pattern[:-1]):
                    return True
            elif pattern == event_type:
                return True

        return False
