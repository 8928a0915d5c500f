"""Celery tasks package."""

from dailybudget.tasks import reminders

__all__ = ["reminders"]
