"""Email service module for badge notifications"""

from classbeyond.core.email.base import BadgeNotification, EmailService
from classbeyond.core.email.console import ConsoleEmailService
from classbeyond.core.email.factory import get_email_service

__all__ = [
    "BadgeNotification",
    "EmailService",
    "ConsoleEmailService",
    "get_email_service",
]
