"""
Mock Email Service
==================

In-memory outbox used by tests and local development.
"""

import logging
from typing import List, Optional

from .interface import EmailException, EmailMessage, EmailServiceInterface


logger = logging.getLogger(__name__)


class MockEmailService(EmailServiceInterface):
    """
    Records messages instead of sending them.

    Set ``fail_with`` to an error message to make the next sends raise
    EmailException, which lets tests exercise the mail-failure path.
    """

    def __init__(self):
        self.sent_messages: List[EmailMessage] = []
        self.fail_with: Optional[str] = None

    def send(self, message: EmailMessage) -> bool:
        if self.fail_with:
            logger.info(f"[MOCK EMAIL] Simulated failure for {message.to}: {self.fail_with}")
            raise EmailException(self.fail_with)

        logger.info(f"[MOCK EMAIL] To: {message.to}, Subject: {message.subject}")
        self.sent_messages.append(message)
        return True

    def clear_sent_messages(self):
        self.sent_messages.clear()

    def get_last_message(self) -> Optional[EmailMessage]:
        return self.sent_messages[-1] if self.sent_messages else None
