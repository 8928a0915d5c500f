"""Service layer for push subscription registration, schedules and budgets."""
from __future__ import annotations

from typing import Any

from loguru import logger

from dailybudget.core.identity import derive_key, issue_token, verify_token
from dailybudget.core.payloads import build_test_payload
from dailybudget.core.schedule import effective_schedule, resolve_timezone, sanitize_schedule
from dailybudget.services.push_sender import PushSender
from dailybudget.storage import (
    BudgetSnapshotRecord,
    BudgetStore,
    SubscriptionRecord,
    SubscriptionStore,
    now_ms,
)
from dailybudget.utils.exceptions import (
    AuthenticationError,
    SubscriptionNotFoundError,
    ValidationError,
)
from dailybudget.utils.logging_config import short_key


class SubscriptionService:
    """Encapsulates the request-scoped operations on one subscription key."""

    def __init__(
        self,
        subscriptions: SubscriptionStore,
        budgets: BudgetStore,
        sender: PushSender | None = None,
    ):
        self.subscriptions = subscriptions
        self.budgets = budgets
        self.sender = sender or PushSender()

    def register(self, subscription: Any, timezone: str | None = None) -> tuple[str, str]:
        """Store ``subscription`` and return its ``(key, token)`` credentials.

        Registering the same endpoint again overwrites the stored record while
        the derived key and token stay the same.
        """

        endpoint = subscription.get("endpoint") if isinstance(subscription, dict) else None
        if not endpoint or not isinstance(endpoint, str):
            raise ValidationError("Missing subscription endpoint")

        key = derive_key(endpoint)
        token = issue_token(endpoint)
        record = SubscriptionRecord(
            endpoint=endpoint,
            subscription=subscription,
            timezone=resolve_timezone(timezone),
            created_at=now_ms(),
        )
        self.subscriptions.set(key, record)
        logger.info("Push subscription registered", key=short_key(key), timezone=record.timezone)
        return key, token

    def authorize(self, key: str | None, token: str | None) -> SubscriptionRecord:
        """Return the record for ``key`` if ``token`` was issued for its endpoint."""

        if not key:
            raise ValidationError("Missing key")
        if not token:
            raise AuthenticationError("Unauthorized")
        record = self.subscriptions.get(key)
        if record is None:
            raise SubscriptionNotFoundError("Subscription not found")
        if not verify_token(record.endpoint, token):
            raise AuthenticationError("Invalid token")
        return record

    def update_schedule(
        self,
        key: str | None,
        token: str | None,
        schedule: Any,
        timezone: str | None = None,
    ) -> list[str]:
        if not key or not isinstance(schedule, list):
            raise ValidationError("Bad Request")
        record = self.authorize(key, token)

        cleaned = sanitize_schedule(schedule)
        updated = record.model_copy(
            update={
                "schedule": cleaned,
                "timezone": timezone or resolve_timezone(record.timezone),
                "updated_at": now_ms(),
            }
        )
        self.subscriptions.set(key, updated)
        logger.info("Reminder schedule updated", key=short_key(key), entries=len(cleaned))
        return cleaned

    def get_schedule(self, key: str | None, token: str | None) -> tuple[str, list[str]]:
        """Return ``(timezone, effective schedule)`` for an authorized key."""

        record = self.authorize(key, token)
        budget = self.budgets.get(key)
        schedule = effective_schedule(record.schedule, budget.schedule if budget else None)
        return resolve_timezone(record.timezone), schedule

    def update_budget(
        self,
        key: str | None,
        token: str | None,
        daily_budget: float,
        remaining_budget: float,
        remaining_days: int,
        schedule: Any = None,
    ) -> str:
        """Replace the budget snapshot.

        A ``schedule`` list, when given, becomes the mirrored schedule;
        otherwise the mirror of the previous snapshot is kept.
        """

        record = self.authorize(key, token)
        previous = self.budgets.get(key)
        if isinstance(schedule, list):
            mirror = sanitize_schedule(schedule)
        else:
            mirror = previous.schedule if previous else None

        snapshot = BudgetSnapshotRecord(
            daily_budget=daily_budget,
            remaining_budget=remaining_budget,
            remaining_days=remaining_days,
            schedule=mirror,
            timezone=resolve_timezone(record.timezone or (previous.timezone if previous else None)),
            updated_at=now_ms(),
        )
        self.budgets.set(key, snapshot)
        logger.debug("Budget snapshot stored", key=short_key(key))
        return key

    def send_test_push(self, key: str | None) -> None:
        """Push the fixed test message to ``key`` right away, without auth."""

        self.sender.ensure_configured()
        if not key:
            raise ValidationError("Missing key")
        record = self.subscriptions.get(key)
        if record is None:
            raise SubscriptionNotFoundError("Subscription not found")

        self.sender.send(record.subscription, build_test_payload())
        logger.info("Test push accepted", key=short_key(key))
