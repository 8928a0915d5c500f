"""Tests for the blob stores and typed record stores."""
from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import redis
from sqlalchemy.exc import IntegrityError

from dailybudget.storage import (
    BudgetSnapshotRecord,
    DatabaseBlobStore,
    RedisBlobStore,
    SubscriptionRecord,
)
from dailybudget.utils.exceptions import StorageError


def test_database_store_get_set_overwrite(store_factory) -> None:
    store = store_factory("subscriptions")

    assert store.get("missing") is None
    store.set("k1", {"a": 1})
    store.set("k1", {"b": 2})

    assert store.get("k1") == {"b": 2}


def test_database_store_namespaces_are_isolated(store_factory) -> None:
    store_factory("subscriptions").set("same", {"kind": "subscription"})
    store_factory("budgets").set("same", {"kind": "budget"})

    assert store_factory("subscriptions").get("same") == {"kind": "subscription"}
    assert store_factory("budgets").get("same") == {"kind": "budget"}


def test_database_store_iterates_across_pages(store_factory) -> None:
    store = store_factory("subscriptions")
    for index in range(5):
        store.set(f"key-{index}", {"n": index})

    items = list(store.iter_items())

    assert [key for key, _ in items] == [f"key-{index}" for index in range(5)]
    # A new enumeration starts from the beginning again.
    assert next(iter(store.iter_items()))[0] == "key-0"


def test_database_store_add_only_when_absent(store_factory) -> None:
    store = store_factory("deliveries")

    assert store.add("marker", {"x": 1}, ttl_seconds=60) is True
    assert store.add("marker", {"x": 2}, ttl_seconds=60) is False
    assert store.get("marker") == {"x": 1}


def test_database_store_expired_entries_are_invisible_and_purged(store_factory, monkeypatch) -> None:
    store = store_factory("deliveries")
    store.add("old", {"x": 1}, ttl_seconds=60)
    store.set("keep", {"x": 2})

    monkeypatch.setattr("dailybudget.storage.database.now_ms", lambda: 10**15)

    assert store.get("old") is None
    assert [key for key, _ in store.iter_items()] == ["keep"]
    assert store.add("old", {"x": 3}, ttl_seconds=60) is True
    assert store.purge_expired() == 0

    monkeypatch.setattr("dailybudget.storage.database.now_ms", lambda: 10**16)
    assert store.purge_expired() == 1
    assert store.get("keep") == {"x": 2}


def test_database_store_set_retries_after_losing_insert_race(session_factory) -> None:
    racing = MagicMock()
    racing.commit.side_effect = IntegrityError(
        "INSERT INTO blobs", {}, Exception("UNIQUE constraint failed")
    )
    sessions = iter([racing])
    store = DatabaseBlobStore("subscriptions", lambda: next(sessions, None) or session_factory())

    store.set("k1", {"a": 1})

    racing.rollback.assert_called_once()
    assert store.get("k1") == {"a": 1}


def test_database_store_set_gives_up_after_second_conflict() -> None:
    session = MagicMock()
    session.commit.side_effect = IntegrityError("INSERT INTO blobs", {}, Exception("conflict"))
    store = DatabaseBlobStore("subscriptions", lambda: session)

    with pytest.raises(StorageError):
        store.set("k1", {"a": 1})
    assert session.commit.call_count == 2


def test_database_store_delete(store_factory) -> None:
    store = store_factory("subscriptions")
    store.set("gone", {"x": 1})

    store.delete("gone")
    store.delete("never-existed")

    assert store.get("gone") is None


def test_subscription_record_round_trips_camel_case(subscription_store, make_subscription) -> None:
    record = SubscriptionRecord(
        endpoint="https://push.example/1",
        subscription=make_subscription("https://push.example/1"),
        timezone="Europe/Vienna",
        schedule=["07:30"],
        created_at=1700000000000,
    )
    subscription_store.set("k", record)

    stored = subscription_store.blobs.get("k")
    assert stored["createdAt"] == 1700000000000
    assert "updatedAt" not in stored
    assert subscription_store.get("k") == record


def test_record_iteration_skips_unreadable_documents(subscription_store, make_subscription) -> None:
    subscription_store.blobs.set("broken", {"subscription": "not a dict"})
    subscription_store.set(
        "ok",
        SubscriptionRecord(endpoint="https://push.example/2", subscription=make_subscription("https://push.example/2")),
    )

    assert [key for key, _ in subscription_store.iter_records()] == ["ok"]


def test_budget_record_defaults(budget_store) -> None:
    budget_store.blobs.set("k", {"dailyBudget": -3.5})

    snapshot = budget_store.get("k")

    assert snapshot == BudgetSnapshotRecord(daily_budget=-3.5)
    assert snapshot.schedule is None


def test_redis_store_uses_namespaced_keys() -> None:
    client = MagicMock()
    client.get.return_value = json.dumps({"a": 1})
    client.set.return_value = True
    store = RedisBlobStore("budgets", client)

    assert store.get("k") == {"a": 1}
    client.get.assert_called_with("budgets:k")

    store.set("k", {"a": 2})
    client.set.assert_called_with("budgets:k", json.dumps({"a": 2}))

    assert store.add("m", {"x": 1}, ttl_seconds=30) is True
    client.set.assert_called_with("budgets:m", json.dumps({"x": 1}), nx=True, ex=30)


def test_redis_store_add_reports_existing_key() -> None:
    client = MagicMock()
    client.set.return_value = None

    assert RedisBlobStore("deliveries", client).add("m", {}, ttl_seconds=30) is False


def test_redis_store_iterates_with_scan() -> None:
    client = MagicMock()
    client.scan_iter.return_value = iter(["subscriptions:a", "subscriptions:b", "subscriptions:c"])
    client.get.side_effect = [json.dumps({"n": 1}), None, json.dumps({"n": 3})]

    items = list(RedisBlobStore("subscriptions", client, batch_size=50).iter_items())

    assert items == [("a", {"n": 1}), ("c", {"n": 3})]
    client.scan_iter.assert_called_once_with(match="subscriptions:*", count=50)


def test_redis_errors_become_storage_errors() -> None:
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")

    with pytest.raises(StorageError):
        RedisBlobStore("subscriptions", client).get("k")
