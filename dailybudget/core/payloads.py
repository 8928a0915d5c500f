"""Push message payloads and the contract the service worker renders them by."""
from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from dailybudget.config import settings


CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "CHF": "CHF"}

REMINDER_TITLE = "💸 Daily Budget"
TEST_TITLE = "🔔 Test"
TEST_BODY = "Das ist eine Test-Benachrichtigung von Daily Budget"
TEST_TAG = "test-push"


class PushPayload(BaseModel):
    """JSON document sent through the push service to the installed worker."""

    title: str
    body: str
    icon: str
    tag: str
    require_interaction: Optional[bool] = Field(default=None, alias="requireInteraction")
    data: Optional[dict[str, Any]] = None

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> str:
        return json.dumps(
            self.model_dump(by_alias=True, exclude_none=True), ensure_ascii=False
        )


def format_currency(amount: Any, currency: str | None = None) -> str:
    """Format ``amount`` German-style, e.g. ``1.234,50 €``."""

    code = (currency or settings.CURRENCY).upper()
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        value = Decimal("0")
    if not value.is_finite():
        value = Decimal("0")
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    whole, cents = f"{abs(value):.2f}".split(".")
    groups = []
    while len(whole) > 3:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    groups.insert(0, whole)
    symbol = CURRENCY_SYMBOLS.get(code, code)
    return f"{sign}{'.'.join(groups)},{cents}\u00a0{symbol}"


def build_reminder_payload(daily_budget: Any, hhmm: str) -> PushPayload:
    """Payload for a scheduled reminder carrying today's budget."""

    return PushPayload(
        title=REMINDER_TITLE,
        body=f"Heutiges Tagesbudget: {format_currency(daily_budget)}",
        icon=settings.NOTIFICATION_ICON,
        tag=f"daily-budget-{hhmm}",
        data={"url": "/"},
    )


def build_test_payload() -> PushPayload:
    return PushPayload(
        title=TEST_TITLE,
        body=TEST_BODY,
        icon=settings.NOTIFICATION_ICON,
        tag=TEST_TAG,
    )


class NotificationDisplay(BaseModel):
    """What the service worker shows for a received push.

    Mirrors ``static/sw.js``: every push renders a visible notification, with
    defaults for anything the payload omits or cannot be parsed.
    """

    title: str = "Daily Budget App"
    body: str = "Du hast eine neue Benachrichtigung!"
    icon: str = "/favicon.ico"
    badge: str = "/favicon.ico"
    tag: str = "budget-notification"
    require_interaction: bool = False
    actions: list[Any] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)


def render_notification(raw: str | bytes | None) -> NotificationDisplay:
    """Resolve a raw push message into display options."""

    display = NotificationDisplay()
    if not raw:
        return display
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return display
    if not isinstance(data, dict):
        return display

    def text(field: str) -> str:
        value = data.get(field)
        return value if isinstance(value, str) and value else getattr(display, field)

    return NotificationDisplay(
        title=text("title"),
        body=text("body"),
        icon=text("icon"),
        badge=text("badge"),
        tag=text("tag"),
        require_interaction=bool(data.get("requireInteraction")),
        actions=data.get("actions") if isinstance(data.get("actions"), list) else [],
        data=data.get("data") if isinstance(data.get("data"), dict) else {},
    )
