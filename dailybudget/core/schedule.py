"""Reminder schedule rules: sanitizing, fallback resolution and local clocks."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Iterable, Sequence
from zoneinfo import ZoneInfo

from dailybudget.config import settings


TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")


def is_valid_time(value: Any) -> bool:
    """Return True for strict zero-padded 24h ``HH:MM`` strings."""

    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def sanitize_schedule(entries: Iterable[Any], limit: int | None = None) -> list[str]:
    """Keep valid ``HH:MM`` entries, de-duplicated in first-seen order, capped.

    ``9:00`` is rejected rather than normalized.
    """

    cap = limit if limit is not None else settings.MAX_SCHEDULE_ENTRIES
    result: list[str] = []
    for entry in entries:
        if len(result) >= cap:
            break
        if is_valid_time(entry) and entry not in result:
            result.append(entry)
    return result


def effective_schedule(
    subscription_schedule: Sequence[str] | None,
    budget_schedule: Sequence[str] | None,
) -> list[str]:
    """Resolve subscription schedule, then budget mirror, then the default."""

    if subscription_schedule:
        return list(subscription_schedule)
    if budget_schedule:
        return list(budget_schedule)
    return list(settings.DEFAULT_SCHEDULE)


def resolve_timezone(name: str | None) -> str:
    return name or settings.DEFAULT_TIMEZONE


def local_hhmm(instant: datetime, tz_name: str | None) -> str:
    """Format ``instant`` as the wall-clock ``HH:MM`` in ``tz_name``.

    Naive instants are taken as UTC. Unknown zones raise
    ``zoneinfo.ZoneInfoNotFoundError``.
    """

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(ZoneInfo(resolve_timezone(tz_name)))
    return f"{local.hour:02d}:{local.minute:02d}"


def local_date(instant: datetime, tz_name: str | None) -> str:
    """Return the subscriber-local calendar date of ``instant`` as ISO text."""

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(ZoneInfo(resolve_timezone(tz_name))).date().isoformat()
