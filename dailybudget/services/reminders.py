"""Reminder dispatch sweep: send due pushes in each subscriber's local time."""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from celery.exceptions import SoftTimeLimitExceeded
from loguru import logger

from dailybudget.config import settings
from dailybudget.core.payloads import build_reminder_payload
from dailybudget.core.schedule import effective_schedule, local_date, local_hhmm
from dailybudget.services.push_sender import PushSender
from dailybudget.storage import BlobStore, BudgetStore, SubscriptionRecord, SubscriptionStore
from dailybudget.utils.exceptions import PushDeliveryError
from dailybudget.utils.logging_config import short_key


@dataclass
class SweepResult:
    checked: int = 0
    due: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    errors: int = 0
    pruned: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class ReminderDispatcher:
    """Walks every stored subscription once per tick and pushes due reminders.

    Delivery is best effort and at most once per matching minute: a tick that
    does not run during the minute loses that reminder, and failed sends are
    not retried. When ``deliveries`` is given, a per-day marker keeps
    overlapping ticks from sending the same reminder twice.
    """

    def __init__(
        self,
        subscriptions: SubscriptionStore,
        budgets: BudgetStore,
        sender: PushSender | None = None,
        deliveries: BlobStore | None = None,
        max_workers: int | None = None,
        prune_expired: bool | None = None,
    ):
        self.subscriptions = subscriptions
        self.budgets = budgets
        self.sender = sender or PushSender()
        self.deliveries = deliveries
        self.max_workers = max_workers or settings.SWEEP_MAX_WORKERS
        self.prune_expired = (
            settings.PRUNE_EXPIRED_SUBSCRIPTIONS if prune_expired is None else prune_expired
        )

    def sweep(self, now: datetime | None = None) -> SweepResult:
        instant = now or datetime.now(timezone.utc)
        self.sender.ensure_configured()

        result = SweepResult()
        try:
            self._run(instant, result)
        except SoftTimeLimitExceeded:
            logger.warning("Reminder sweep interrupted", at=instant.isoformat(), **result.as_dict())
            raise

        logger.info("Reminder sweep finished", at=instant.isoformat(), **result.as_dict())
        return result

    def _run(self, instant: datetime, result: SweepResult) -> None:
        pending: list[tuple[str, Future]] = []

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="push") as pool:
            for key, record in self.subscriptions.iter_records():
                result.checked += 1
                try:
                    job = self._prepare(key, record, instant, result)
                except SoftTimeLimitExceeded:
                    raise
                except Exception as exc:
                    result.errors += 1
                    logger.error("Reminder check failed", key=short_key(key), error=str(exc))
                    continue
                if job is not None:
                    pending.append((key, pool.submit(self.sender.send, *job)))

            for key, future in pending:
                try:
                    future.result()
                except SoftTimeLimitExceeded:
                    raise
                except PushDeliveryError as exc:
                    result.failed += 1
                    logger.warning(
                        "Reminder push failed",
                        key=short_key(key),
                        push_status=exc.push_status,
                        error=exc.message,
                    )
                    if exc.subscription_gone and self.prune_expired:
                        self._prune(key, result)
                except Exception as exc:
                    result.failed += 1
                    logger.error("Reminder push crashed", key=short_key(key), error=str(exc))
                else:
                    result.sent += 1

    def _prepare(self, key: str, record: SubscriptionRecord, instant: datetime, result: SweepResult):
        """Return ``(subscription, payload)`` when ``key`` is due, else ``None``.

        The delivery marker is claimed last, once the payload is built, so a
        failed read leaves the reminder open for the next tick.
        """

        hhmm = local_hhmm(instant, record.timezone)
        budget = self.budgets.get(key)
        schedule = effective_schedule(record.schedule, budget.schedule if budget else None)
        if hhmm not in schedule:
            return None

        result.due += 1
        payload = build_reminder_payload(budget.daily_budget if budget else 0, hhmm)

        if self.deliveries is not None:
            marker = f"{key}|{local_date(instant, record.timezone)}|{hhmm}"
            ttl = settings.DELIVERY_MARKER_TTL_HOURS * 3600
            if not self.deliveries.add(marker, {"sentAt": instant.isoformat()}, ttl_seconds=ttl):
                result.skipped += 1
                return None

        return record.subscription, payload

    def _prune(self, key: str, result: SweepResult) -> None:
        try:
            self.subscriptions.delete(key)
        except Exception as exc:
            logger.error("Pruning expired subscription failed", key=short_key(key), error=str(exc))
            return
        result.pruned += 1
        logger.info("Expired subscription pruned", key=short_key(key))
