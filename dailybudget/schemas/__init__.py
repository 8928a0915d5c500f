"""Pydantic schemas package."""

from dailybudget.schemas.push import (
    BudgetUpdateRequest,
    BudgetUpdateResponse,
    KeyRequest,
    OkResponse,
    PublicKeyResponse,
    RegisterRequest,
    RegisterResponse,
    ScheduleReadResponse,
    ScheduleUpdateRequest,
    ScheduleUpdateResponse,
    coerce_number,
)

__all__ = [
    "BudgetUpdateRequest",
    "BudgetUpdateResponse",
    "KeyRequest",
    "OkResponse",
    "PublicKeyResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ScheduleReadResponse",
    "ScheduleUpdateRequest",
    "ScheduleUpdateResponse",
    "coerce_number",
]
