"""Abstract base class for email services"""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class BadgeNotification(BaseModel):
    """Payload for a "badge earned" notification"""

    recipient_id: str
    recipient_email: str
    recipient_name: str = "Student"
    badge_name: str
    description: str
    points: int

    @property
    def message(self) -> str:
        return (
            f'You earned the "{self.badge_name}" badge: {self.description} '
            f"(+{self.points} points)"
        )


class EmailService(ABC):
    """Abstract email service interface"""

    @abstractmethod
    async def send_badge_earned(self, notification: BadgeNotification) -> bool:
        """Send a badge earned email to the student.

        Args:
            notification: Recipient and badge details

        Returns:
            True if email was sent successfully, False otherwise
        """
        raise NotImplementedError("send_badge_earned method not implemented")
