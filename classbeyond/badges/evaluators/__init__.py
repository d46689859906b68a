"""Badge Evaluators"""

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.evaluators.context import EvaluationResult, EventContext
from classbeyond.badges.evaluators.registry import (
    create_evaluator,
    get_evaluator_class,
    list_registered_evaluators,
    register_evaluator,
)

__all__ = [
    "BaseEvaluator",
    "EvaluationResult",
    "EventContext",
    "create_evaluator",
    "get_evaluator_class",
    "list_registered_evaluators",
    "register_evaluator",
]
