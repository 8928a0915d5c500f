"""Shared API dependencies."""
from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dailybudget.services.push_sender import PushSender
from dailybudget.services.subscriptions import SubscriptionService
from dailybudget.storage import (
    BUDGETS,
    SUBSCRIPTIONS,
    BlobStore,
    BudgetStore,
    SubscriptionStore,
    get_blob_store,
)

# Missing credentials are reported by the service so the 400/401/404 order holds.
bearer_scheme = HTTPBearer(auto_error=False)


def get_store_factory():
    """Return the callable that opens a blob store for a namespace."""

    return get_blob_store


def get_subscription_store(factory=Depends(get_store_factory)) -> SubscriptionStore:
    blobs: BlobStore = factory(SUBSCRIPTIONS)
    return SubscriptionStore(blobs)


def get_budget_store(factory=Depends(get_store_factory)) -> BudgetStore:
    blobs: BlobStore = factory(BUDGETS)
    return BudgetStore(blobs)


def get_push_sender() -> PushSender:
    return PushSender()


def get_subscription_service(
    subscriptions: SubscriptionStore = Depends(get_subscription_store),
    budgets: BudgetStore = Depends(get_budget_store),
    sender: PushSender = Depends(get_push_sender),
) -> SubscriptionService:
    """Assemble the subscription service with request-scoped dependencies."""

    return SubscriptionService(subscriptions, budgets, sender=sender)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Return the raw bearer token from the Authorization header, if any."""

    if credentials is None:
        return None
    return credentials.credentials or None
