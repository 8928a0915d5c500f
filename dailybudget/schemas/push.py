"""Pydantic models for the push subscription API."""
from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_number(value: Any) -> float:
    """Best-effort numeric conversion; anything unparsable becomes 0."""

    if value is None or isinstance(value, (dict, list)):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RegisterRequest(_Request):
    timezone: Optional[str] = None
    subscription: Optional[dict[str, Any]] = None


class RegisterResponse(BaseModel):
    ok: bool = True
    key: str
    token: str


class ScheduleUpdateRequest(_Request):
    key: Optional[str] = None
    timezone: Optional[str] = None
    # Shape is checked by the service so non-lists surface as 400, not 422.
    schedule: Any = None


class ScheduleUpdateResponse(BaseModel):
    ok: bool = True
    schedule: list[str]


class KeyRequest(_Request):
    key: Optional[str] = None


class ScheduleReadResponse(BaseModel):
    ok: bool = True
    timezone: str
    schedule: list[str]


class BudgetUpdateRequest(_Request):
    """Budget figures; malformed numbers are zeroed rather than rejected."""

    key: Optional[str] = None
    daily_budget: float = Field(default=0.0, alias="dailyBudget")
    remaining_budget: float = Field(default=0.0, alias="remainingBudget")
    remaining_days: int = Field(default=0, alias="remainingDays")
    # Optional mirror of the reminder times; omitted means keep the stored one.
    schedule: Any = None

    @field_validator("daily_budget", "remaining_budget", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("remaining_days", mode="before")
    @classmethod
    def coerce_days(cls, value: Any) -> int:
        return max(int(coerce_number(value)), 0)


class BudgetUpdateResponse(BaseModel):
    ok: bool = True
    key: str


class OkResponse(BaseModel):
    ok: bool = True


class PublicKeyResponse(BaseModel):
    publicKey: str
