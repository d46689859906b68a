"""Evaluator Registry - Maps requirement types to implementations"""

import logging
from typing import Type

from classbeyond.badges.evaluators.base import BaseEvaluator
from classbeyond.badges.schemas.badge import BadgeDefinition

logger = logging.getLogger(__name__)


# Registry of evaluator classes keyed by requirement type
_EVALUATOR_REGISTRY: dict[str, Type[BaseEvaluator]] = {}


def register_evaluator(requirement_type: str):
    """Decorator to register an evaluator class.

    Usage:
    @register_evaluator("quiz_count")
    class QuizCountEvaluator(BaseEvaluator):
        ...
    """

    def decorator(cls: Type[BaseEvaluator]) -> Type[BaseEvaluator]:
        if requirement_type in _EVALUATOR_REGISTRY:
            logger.warning("Overwriting evaluator registration: %s", requirement_type)
        _EVALUATOR_REGISTRY[requirement_type] = cls
        logger.debug("Registered evaluator: %s -> %s", requirement_type, cls.__name__)
        return cls

    return decorator


def get_evaluator_class(requirement_type: str) -> Type[BaseEvaluator]:
    """Get a registered evaluator class by requirement type.
    Raises ValueError if evaluator is not found.
    """
    try:
        return _EVALUATOR_REGISTRY[requirement_type]
    except KeyError:
        raise ValueError(f"No evaluator for requirement type: {requirement_type}") from None


def create_evaluator(badge: BadgeDefinition) -> BaseEvaluator | None:
    """Create the evaluator for a badge.
    Returns None (and warns) when the requirement type is not supported.
    """
    try:
        evaluator_class = get_evaluator_class(badge.requirement_type)
        return evaluator_class(badge)
    except ValueError as e:
        logger.warning("Skipping badge %r: %s", badge.name, e)
        return None


def list_registered_evaluators() -> list[str]:
    """List all registered requirement types"""
    return list(_EVALUATOR_REGISTRY.keys())


def _register_all_evaluators():
    """Import all evaluator implementations to trigger registration"""
    # pylint: disable=import-outside-toplevel,unused-import
    from classbeyond.badges.evaluators.implementations import (  # noqa: F401
        activity_count,
        login_streak,
        speed_completion,
        subject_mastery,
        time_based,
        weekend_activity,
    )

    logger.info("Registered %d evaluators", len(_EVALUATOR_REGISTRY))


# Auto-register on import
_register_all_evaluators()
