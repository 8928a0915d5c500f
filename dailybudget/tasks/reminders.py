"""Celery tasks for reminder dispatch."""
from __future__ import annotations

from datetime import datetime

from loguru import logger

from dailybudget.celery_app import celery_app
from dailybudget.config import settings
from dailybudget.services.reminders import ReminderDispatcher
from dailybudget.storage import (
    BUDGETS,
    DELIVERIES,
    SUBSCRIPTIONS,
    BudgetStore,
    SubscriptionStore,
    get_blob_store,
)


def build_dispatcher() -> ReminderDispatcher:
    deliveries = get_blob_store(DELIVERIES) if settings.REMINDER_DEDUPE_ENABLED else None
    return ReminderDispatcher(
        SubscriptionStore(get_blob_store(SUBSCRIPTIONS)),
        BudgetStore(get_blob_store(BUDGETS)),
        deliveries=deliveries,
    )


@celery_app.task(name="dailybudget.tasks.reminders.send_due_reminders")
def send_due_reminders(at: str | None = None) -> dict[str, int]:
    """Push every reminder due in the current minute (or at ISO instant ``at``)."""

    instant = datetime.fromisoformat(at) if at else None
    try:
        result = build_dispatcher().sweep(instant)
    except Exception as exc:
        logger.error("Reminder sweep aborted", error=str(exc))
        raise
    return result.as_dict()


@celery_app.task(name="dailybudget.tasks.reminders.purge_delivery_markers")
def purge_delivery_markers() -> dict[str, int]:
    """Remove expired per-day delivery markers (database backend only)."""

    deleted = get_blob_store(DELIVERIES).purge_expired()
    logger.info("Delivery markers purged", deleted=deleted)
    return {"deleted": deleted}
