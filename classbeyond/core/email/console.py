"""Console email service for development - prints badge notifications to console"""

from classbeyond.core.email.base import BadgeNotification, EmailService


class ConsoleEmailService(EmailService):
    """Development email service that logs to console"""

    async def send_badge_earned(self, notification: BadgeNotification) -> bool:
        """Print the notification to console instead of sending email"""
        print("\n" + "=" * 60)
        print("📧 BADGE EARNED EMAIL (Console Mode)")
        print("=" * 60)
        print(f"To: {notification.recipient_email}")
        print("Subject: Congratulations! You Earned a Badge - ClassBeyond")
        print("-" * 60)
        print(f"Amazing work, {notification.recipient_name}!\n")
        print(f"  {notification.message}")
        print("\n" + "=" * 60 + "\n")
        return True
