"""Pytest fixtures for the push backend."""

import os
from collections.abc import Generator
from unittest.mock import MagicMock, patch

os.environ.setdefault("HMAC_SECRET", "test-hmac-secret")
os.environ.setdefault("VAPID_PUBLIC_KEY", "test-public-key")
os.environ.setdefault("VAPID_PRIVATE_KEY", "test-private-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORE_BACKEND", "database")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dailybudget.api import deps
from dailybudget.db.base import Base
from dailybudget.db.models.blob import BlobEntry
from dailybudget.main import create_app
from dailybudget.storage import (
    BUDGETS,
    DELIVERIES,
    SUBSCRIPTIONS,
    BudgetStore,
    DatabaseBlobStore,
    SubscriptionStore,
)


def _subscription(
    endpoint: str = "https://fcm.googleapis.com/fcm/send/device-1",
    p256dh: str = "BNc-p256dh-key",
    auth: str = "auth-secret",
) -> dict:
    return {"endpoint": endpoint, "expirationTime": None, "keys": {"p256dh": p256dh, "auth": auth}}


@pytest.fixture()
def make_subscription():
    return _subscription


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[BlobEntry.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[BlobEntry.__table__])


@pytest.fixture()
def session_factory(db_engine) -> Generator[sessionmaker, None, None]:
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db_engine, expire_on_commit=False)
    try:
        yield factory
    finally:
        with factory() as db:
            db.execute(delete(BlobEntry))
            db.commit()


@pytest.fixture()
def store_factory(session_factory):
    # A tiny page size makes enumeration cross page boundaries in tests.
    def open_store(namespace: str) -> DatabaseBlobStore:
        return DatabaseBlobStore(namespace, session_factory, batch_size=2)

    return open_store


@pytest.fixture()
def subscription_store(store_factory) -> SubscriptionStore:
    return SubscriptionStore(store_factory(SUBSCRIPTIONS))


@pytest.fixture()
def budget_store(store_factory) -> BudgetStore:
    return BudgetStore(store_factory(BUDGETS))


@pytest.fixture()
def delivery_store(store_factory) -> DatabaseBlobStore:
    return store_factory(DELIVERIES)


@pytest.fixture()
def webpush_mock() -> Generator[MagicMock, None, None]:
    with patch("dailybudget.services.push_sender.webpush") as mocked:
        yield mocked


@pytest.fixture()
def app(store_factory):
    application = create_app()
    application.dependency_overrides[deps.get_store_factory] = lambda: store_factory
    return application


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
