"""
Email Service Interface
========================

Contract for the outbound mail sender.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class EmailMessage:
    """
    An outbound email.

    Attributes:
        subject: Subject line
        body: Plain text body
        to: Recipient addresses
        from_email: Sender address (settings.DEFAULT_FROM_EMAIL when None)
        html_body: Optional HTML alternative
    """

    subject: str
    body: str
    to: List[str]
    from_email: Optional[str] = None
    html_body: Optional[str] = None
    reply_to: List[str] = field(default_factory=list)


class EmailServiceInterface(ABC):
    """
    Abstract mail sender.

    Concrete implementations:
        - SMTPEmailService: Django's configured email backend
        - MockEmailService: in-memory outbox for tests and local development
    """

    @abstractmethod
    def send(self, message: EmailMessage) -> bool:
        """
        Send a single message.

        Returns:
            True if the backend accepted the message

        Raises:
            EmailException: If the backend rejects the message or is unreachable
        """

    def send_password_reset_code(self, email: str, code: str, expires_minutes: int) -> bool:
        """Send a one-time password reset code."""
        body = (
            f"Your FreelanceHub password reset code is {code}.\n\n"
            f"It expires in {expires_minutes} minutes. If you did not request a reset, ignore this email."
        )
        html_body = (
            "<p>Your FreelanceHub password reset code is:</p>"
            f"<h2>{code}</h2>"
            f"<p>It expires in {expires_minutes} minutes.</p>"
        )
        return self.send(
            EmailMessage(subject="Your password reset code", body=body, to=[email], html_body=html_body)
        )


class EmailException(Exception):
    """Raised when the mail sender fails."""

    pass
