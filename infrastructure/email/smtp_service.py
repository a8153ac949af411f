"""
SMTP Email Service
==================

EmailServiceInterface backed by Django's configured email backend.
"""

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from .interface import EmailException, EmailMessage, EmailServiceInterface


logger = logging.getLogger(__name__)


class SMTPEmailService(EmailServiceInterface):
    """
    Sends mail through ``django.core.mail``.

    Configuration (in settings.py):
        EMAIL_HOST, EMAIL_PORT, EMAIL_HOST_USER, EMAIL_HOST_PASSWORD,
        EMAIL_USE_TLS, DEFAULT_FROM_EMAIL
    """

    def __init__(self):
        self.default_from = getattr(settings, "DEFAULT_FROM_EMAIL", "noreply@freelancehub.local")

    def send(self, message: EmailMessage) -> bool:
        try:
            mail = EmailMultiAlternatives(
                subject=message.subject,
                body=message.body,
                from_email=message.from_email or self.default_from,
                to=message.to,
                reply_to=message.reply_to or None,
            )
            if message.html_body:
                mail.attach_alternative(message.html_body, "text/html")

            num_sent = mail.send(fail_silently=False)
        except Exception as e:
            logger.error(f"Failed to send email to {message.to}: {str(e)}")
            raise EmailException(f"Email send failed: {str(e)}") from e

        if num_sent > 0:
            logger.info(f"Email sent successfully to {message.to}")
            return True

        logger.warning(f"Email backend accepted no messages for {message.to}")
        return False
