"""Key-value storage for subscriptions, budget snapshots and delivery markers."""
from __future__ import annotations

from functools import lru_cache

import redis

from dailybudget.config import settings
from dailybudget.storage.base import BlobStore, now_ms
from dailybudget.storage.database import DatabaseBlobStore
from dailybudget.storage.records import (
    BudgetSnapshotRecord,
    BudgetStore,
    SubscriptionRecord,
    SubscriptionStore,
)
from dailybudget.storage.redis_store import RedisBlobStore

SUBSCRIPTIONS = "subscriptions"
BUDGETS = "budgets"
DELIVERIES = "deliveries"


@lru_cache()
def _redis_client() -> redis.Redis:
    return redis.Redis.from_url(str(settings.REDIS_URL), decode_responses=True)


def get_blob_store(namespace: str) -> BlobStore:
    """Return the configured backend for ``namespace``."""

    if settings.STORE_BACKEND == "redis":
        return RedisBlobStore(namespace, _redis_client())

    from dailybudget.db.session import SessionLocal

    return DatabaseBlobStore(namespace, SessionLocal)


__all__ = [
    "BUDGETS",
    "DELIVERIES",
    "SUBSCRIPTIONS",
    "BlobStore",
    "BudgetSnapshotRecord",
    "BudgetStore",
    "DatabaseBlobStore",
    "RedisBlobStore",
    "SubscriptionRecord",
    "SubscriptionStore",
    "get_blob_store",
    "now_ms",
]
