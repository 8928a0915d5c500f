"""Redis-backed blob store."""
from __future__ import annotations

import json
from typing import Any, Iterator

import redis
from loguru import logger

from dailybudget.config import settings
from dailybudget.storage.base import BlobStore
from dailybudget.utils.exceptions import StorageError


class RedisBlobStore(BlobStore):
    """Stores each document as a Redis string named ``namespace:key``."""

    def __init__(self, namespace: str, client: redis.Redis, batch_size: int | None = None) -> None:
        super().__init__(namespace)
        self._redis = client
        self.batch_size = batch_size or settings.STORE_BATCH_SIZE

    def _compose(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Any | None:
        try:
            value = self._redis.get(self._compose(key))
        except redis.RedisError as exc:
            logger.error("Redis read failed", namespace=self.namespace, error=str(exc))
            raise StorageError(f"Failed to read {self.namespace} entry") from exc
        return json.loads(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        try:
            self._redis.set(self._compose(key), json.dumps(value))
        except redis.RedisError as exc:
            logger.error("Redis write failed", namespace=self.namespace, error=str(exc))
            raise StorageError(f"Failed to write {self.namespace} entry") from exc

    def add(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        try:
            stored = self._redis.set(
                self._compose(key), json.dumps(value), nx=True, ex=ttl_seconds or None
            )
        except redis.RedisError as exc:
            raise StorageError(f"Failed to add {self.namespace} entry") from exc
        return bool(stored)

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._compose(key))
        except redis.RedisError as exc:
            raise StorageError(f"Failed to delete {self.namespace} entry") from exc

    def iter_items(self) -> Iterator[tuple[str, Any]]:
        prefix = f"{self.namespace}:"
        try:
            for name in self._redis.scan_iter(match=f"{prefix}*", count=self.batch_size):
                value = self._redis.get(name)
                if value is None:
                    continue  # expired or deleted mid-scan
                yield name[len(prefix):], json.loads(value)
        except redis.RedisError as exc:
            raise StorageError(f"Failed to list {self.namespace} entries") from exc
