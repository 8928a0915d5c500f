"""SQLAlchemy-backed blob store."""
from __future__ import annotations

import json
from typing import Any, Callable, Iterator

from loguru import logger
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dailybudget.config import settings
from dailybudget.db.models.blob import BlobEntry
from dailybudget.storage.base import BlobStore, now_ms
from dailybudget.utils.exceptions import StorageError


class DatabaseBlobStore(BlobStore):
    """Stores each document as a row of the ``blobs`` table."""

    def __init__(
        self,
        namespace: str,
        session_factory: Callable[[], Session],
        batch_size: int | None = None,
    ) -> None:
        super().__init__(namespace)
        self.session_factory = session_factory
        self.batch_size = batch_size or settings.STORE_BATCH_SIZE

    @staticmethod
    def _expired(entry: BlobEntry, now: int) -> bool:
        return entry.expires_at is not None and entry.expires_at <= now

    def get(self, key: str) -> Any | None:
        db = self.session_factory()
        try:
            entry = db.get(BlobEntry, (self.namespace, key))
            if entry is None or self._expired(entry, now_ms()):
                return None
            return json.loads(entry.payload)
        except SQLAlchemyError as exc:
            logger.error("Blob read failed", namespace=self.namespace, error=str(exc))
            raise StorageError(f"Failed to read {self.namespace} entry") from exc
        finally:
            db.close()

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        for attempt in range(2):
            db = self.session_factory()
            try:
                db.merge(
                    BlobEntry(namespace=self.namespace, key=key, payload=payload, expires_at=None)
                )
                db.commit()
                return
            except IntegrityError as exc:
                # Lost an insert race on a new key; the retried merge updates the winner's row.
                db.rollback()
                if attempt:
                    raise StorageError(f"Failed to write {self.namespace} entry") from exc
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("Blob write failed", namespace=self.namespace, error=str(exc))
                raise StorageError(f"Failed to write {self.namespace} entry") from exc
            finally:
                db.close()

    def add(self, key: str, value: Any, ttl_seconds: int | None = None) -> bool:
        now = now_ms()
        expires_at = now + ttl_seconds * 1000 if ttl_seconds else None
        db = self.session_factory()
        try:
            existing = db.get(BlobEntry, (self.namespace, key))
            if existing is not None:
                if not self._expired(existing, now):
                    return False
                db.delete(existing)
                db.flush()
            db.add(
                BlobEntry(
                    namespace=self.namespace,
                    key=key,
                    payload=json.dumps(value),
                    expires_at=expires_at,
                )
            )
            db.commit()
            return True
        except IntegrityError:
            # A concurrent writer inserted the same key first.
            db.rollback()
            return False
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(f"Failed to add {self.namespace} entry") from exc
        finally:
            db.close()

    def delete(self, key: str) -> None:
        db = self.session_factory()
        try:
            db.execute(
                delete(BlobEntry).where(
                    BlobEntry.namespace == self.namespace, BlobEntry.key == key
                )
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(f"Failed to delete {self.namespace} entry") from exc
        finally:
            db.close()

    def iter_items(self) -> Iterator[tuple[str, Any]]:
        """Page through the namespace in key order, one short session per page."""

        cursor: str | None = None
        while True:
            stmt = (
                select(BlobEntry.key, BlobEntry.payload)
                .where(BlobEntry.namespace == self.namespace)
                .where(or_(BlobEntry.expires_at.is_(None), BlobEntry.expires_at > now_ms()))
                .order_by(BlobEntry.key)
                .limit(self.batch_size)
            )
            if cursor is not None:
                stmt = stmt.where(BlobEntry.key > cursor)

            db = self.session_factory()
            try:
                rows = db.execute(stmt).all()
            except SQLAlchemyError as exc:
                raise StorageError(f"Failed to list {self.namespace} entries") from exc
            finally:
                db.close()

            for key, payload in rows:
                yield key, json.loads(payload)
            if len(rows) < self.batch_size:
                return
            cursor = rows[-1][0]

    def purge_expired(self) -> int:
        db = self.session_factory()
        try:
            result = db.execute(
                delete(BlobEntry)
                .where(BlobEntry.namespace == self.namespace)
                .where(BlobEntry.expires_at.is_not(None))
                .where(BlobEntry.expires_at <= now_ms())
            )
            db.commit()
            return result.rowcount or 0
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError(f"Failed to purge {self.namespace} entries") from exc
        finally:
            db.close()
