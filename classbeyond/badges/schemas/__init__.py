"""Badge Schemas"""

from classbeyond.badges.schemas.badge import (
    REQUIREMENT_TYPES,
    BadgeDefinition,
    BadgeSchema,
    CatalogFile,
    StudentBadgeView,
    UnknownRequirement,
)

__all__ = [
    "REQUIREMENT_TYPES",
    "BadgeDefinition",
    "BadgeSchema",
    "CatalogFile",
    "StudentBadgeView",
    "UnknownRequirement",
]
