"""Outgoing email."""

import logging
import smtplib
from email.message import EmailMessage

from lms.config import settings

logger = logging.getLogger(__name__)


def verification_link(token: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/verify-email?token={token}"


def send_verification_email(to: str, token: str) -> None:
    """Send the account verification link to *to*.

    Without ``SMTP_HOST`` configured the link is only logged, which is what
    local development relies on.
    """
    link = verification_link(token)
    if not settings.SMTP_HOST:
        logger.info("SMTP not configured, verification link for %s: %s", to, link)
        return

    message = EmailMessage()
    message["From"] = settings.MAIL_FROM
    message["To"] = to
    message["Subject"] = "Email Verification"
    message.set_content(f"Please click the link below to verify your email:\n{link}")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
        if settings.SMTP_USE_TLS:
            smtp.starttls()
        if settings.SMTP_USERNAME:
            smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        smtp.send_message(message)
    logger.info("Verification email sent to %s", to)
