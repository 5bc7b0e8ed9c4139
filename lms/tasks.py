"""Background tasks executed by Celery workers."""

import logging
import smtplib

from lms.celery_app import celery_app
from lms.services.email import send_verification_email

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="send_verification_email", max_retries=3)
def send_verification_email_task(self, to: str, token: str) -> dict:
    """Deliver the email-verification link for a freshly registered user."""
    try:
        send_verification_email(to, token)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception("Verification email to %s failed", to)
        # Retry with exponential back-off (30s, 90s, 270s)
        raise self.retry(exc=exc, countdown=30 * (3**self.request.retries))
    return {"success": True, "to": to}
