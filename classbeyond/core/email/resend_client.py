"""Resend email service implementation"""

import logging
from html import escape

from classbeyond.config import settings
from classbeyond.core.email.base import BadgeNotification, EmailService

logger = logging.getLogger(__name__)

resend = None  # pylint: disable=invalid-name

# avoiding import errors when not using resend
if settings.EMAIL_PROVIDER == "resend":
    # pylint: disable=import-outside-toplevel
    import resend

    resend.api_key = settings.RESEND_API_KEY


class ResendEmailService(EmailService):
    """Email service using Resend API"""

    def __init__(self):
        self._resend = resend

    async def send_badge_earned(self, notification: BadgeNotification) -> bool:
        """Send badge earned email via Resend"""
        badges_url = f"{settings.APP_URL}/badges"
        name = escape(notification.recipient_name)
        message = escape(notification.message)
        try:
            self._resend.Emails.send(
                {
                    "from": f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>",
                    "to": [notification.recipient_email],
                    "subject": "Congratulations! You Earned a Badge - ClassBeyond",
                    "html": f"""
                    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                        <div style="background: #f59e0b; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
                            <h1 style="color: white; margin: 0;">🏆 Achievement Unlocked!</h1>
                        </div>
                        <div style="background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px;">
                            <h2 style="color: #1f2937;">Amazing work, {name}!</h2>
                            <p style="color: #4b5563; font-size: 16px; line-height: 1.6;">{message}</p>
                            <p style="text-align: center; margin: 30px 0;">
                                <a href="{badges_url}" style="display: inline-block; padding: 12px 30px; background-color: #f59e0b; color: white; text-decoration: none; border-radius: 6px; font-weight: bold;">
                                    View All Your Badges
                                </a>
                            </p>
                            <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">
                            <p style="color: #6b7280; font-size: 14px; text-align: center;">
                                This is an automated notification from ClassBeyond
                            </p>
                        </div>
                    </div>
                """,
                    "text": (
                        f"Amazing work, {notification.recipient_name}!\n\n"
                        f"{notification.message}\n\n"
                        f"View all your badges at: {badges_url}"
                    ),
                }
            )
            return True
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Failed to send badge email to %s via Resend: %s",
                notification.recipient_id,
                e,
            )
            return False
