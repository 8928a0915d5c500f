"""Celery application instance and configuration."""
from __future__ import annotations

from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_process_init

from dailybudget.config import settings
from dailybudget.utils.logging_config import configure_logging


def _resolve_broker_url() -> str:
    if settings.CELERY_BROKER_URL is not None:
        return str(settings.CELERY_BROKER_URL)
    return str(settings.REDIS_URL)


def _resolve_result_backend() -> str:
    if settings.CELERY_RESULT_BACKEND is not None:
        return str(settings.CELERY_RESULT_BACKEND)
    return str(settings.REDIS_URL)


celery_app = Celery(
    "daily_budget_push",
    broker=_resolve_broker_url(),
    backend=_resolve_result_backend(),
    include=["dailybudget.tasks.reminders"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",  # Subscriber-local times are computed per record
    enable_utc=True,
    task_track_started=True,
    # A sweep must finish inside its minute
    task_time_limit=55,
    task_soft_time_limit=50,
    result_expires=3600,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
)

celery_app.conf.beat_schedule = {
    "send-due-reminders": {
        "task": "dailybudget.tasks.reminders.send_due_reminders",
        "schedule": crontab(),  # every minute
        "options": {"expires": 50},
    },
    "purge-delivery-markers": {
        "task": "dailybudget.tasks.reminders.purge_delivery_markers",
        "schedule": crontab(hour=3, minute=0),
    },
}


@worker_process_init.connect
def _configure_worker_logging(**_: object) -> None:
    configure_logging()


__all__ = ["celery_app"]
