"""Badge Processor"""

from classbeyond.badges.processor.badge_service import BadgeService

__all__ = ["BadgeService"]
