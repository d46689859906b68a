"""ClassBeyond API Routes"""

from .activity import router as activity_router
from .badges import router as badges_router

__all__ = ["activity_router", "badges_router"]
