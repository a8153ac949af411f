"""
Celery configuration for the freelanceBackend project.

Runs background housekeeping such as purging expired password reset codes.
"""

import os

from celery import Celery


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "freelanceBackend.settings")

app = Celery("freelanceBackend")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "purge-expired-reset-codes": {
        "task": "authentication.tasks.purge_expired_reset_codes",
        "schedule": 60.0 * 30.0,  # Every 30 minutes
        "options": {"expires": 10.0 * 60.0},
    },
}

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=60 * 60 * 24,
    worker_max_tasks_per_child=1000,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
)
