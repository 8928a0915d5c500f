"""Key-value blob store contract shared by every backend."""
from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Iterator


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


class BlobStore(ABC):
    """JSON documents addressed by key within one namespace.

    ``set`` is a full overwrite with last-writer-wins semantics; there is no
    versioning or locking. ``iter_items`` is lazy and may be started again at
    any time.
    """

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored document or ``None``."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous document."""

    @abstractmethod
    def add(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        """Store ``value`` only if ``key`` is absent; return whether it was stored."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""

    @abstractmethod
    def iter_items(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(key, document)`` pairs without loading the namespace at once."""

    def purge_expired(self) -> int:
        """Drop expired documents; backends with native expiry return 0."""

        return 0
