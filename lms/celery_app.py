"""Celery application for the LMS background jobs.

Only outbound e-mail runs here today. It is routed to its own queue so a
worker can be started for it alone:

    celery -A lms.celery_app worker -Q email
"""

from celery import Celery

from lms.config import settings

celery_app = Celery(
    "lms",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["lms.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_default_queue=settings.CELERY_DEFAULT_QUEUE,
    task_routes={
        "send_verification_email": {"queue": settings.CELERY_EMAIL_QUEUE},
    },
    # verification mails are fire-and-forget
    task_ignore_result=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    # Eager by default so dev and tests need no broker.
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=True,
)
