"""Push subscription, schedule and budget endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from dailybudget.api import deps
from dailybudget.config import settings
from dailybudget.schemas import (
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
)
from dailybudget.services.subscriptions import SubscriptionService

router = APIRouter(prefix="/push", tags=["push"])


def _no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store"


@router.get("/publicVapidKey", response_model=PublicKeyResponse)
def public_vapid_key(response: Response) -> PublicKeyResponse:
    """Return the VAPID public key the client subscribes with."""

    _no_store(response)
    return PublicKeyResponse(publicKey=settings.VAPID_PUBLIC_KEY)


@router.post("/register", response_model=RegisterResponse)
def register(
    payload: RegisterRequest,
    response: Response,
    service: SubscriptionService = Depends(deps.get_subscription_service),
) -> RegisterResponse:
    """Store a push subscription and hand back its key and bearer token."""

    key, token = service.register(payload.subscription, payload.timezone)
    _no_store(response)
    return RegisterResponse(key=key, token=token)


@router.post("/updateSchedule", response_model=ScheduleUpdateResponse)
def update_schedule(
    payload: ScheduleUpdateRequest,
    response: Response,
    token: str | None = Depends(deps.get_bearer_token),
    service: SubscriptionService = Depends(deps.get_subscription_service),
) -> ScheduleUpdateResponse:
    schedule = service.update_schedule(payload.key, token, payload.schedule, payload.timezone)
    _no_store(response)
    return ScheduleUpdateResponse(schedule=schedule)


@router.post("/getSchedule", response_model=ScheduleReadResponse)
def get_schedule(
    payload: KeyRequest,
    response: Response,
    token: str | None = Depends(deps.get_bearer_token),
    service: SubscriptionService = Depends(deps.get_subscription_service),
) -> ScheduleReadResponse:
    """Return the effective reminder times and timezone."""

    timezone, schedule = service.get_schedule(payload.key, token)
    _no_store(response)
    return ScheduleReadResponse(timezone=timezone, schedule=schedule)


@router.post("/updateBudget", response_model=BudgetUpdateResponse)
def update_budget(
    payload: BudgetUpdateRequest,
    response: Response,
    token: str | None = Depends(deps.get_bearer_token),
    service: SubscriptionService = Depends(deps.get_subscription_service),
) -> BudgetUpdateResponse:
    key = service.update_budget(
        payload.key,
        token,
        daily_budget=payload.daily_budget,
        remaining_budget=payload.remaining_budget,
        remaining_days=payload.remaining_days,
        schedule=payload.schedule,
    )
    _no_store(response)
    return BudgetUpdateResponse(key=key)


@router.post("/testPush", response_model=OkResponse)
def test_push(
    payload: KeyRequest,
    service: SubscriptionService = Depends(deps.get_subscription_service),
) -> OkResponse:
    """Send the test notification to a stored subscription immediately."""

    service.send_test_push(payload.key)
    return OkResponse()
