"""Typed subscription and budget stores on top of a blob store."""
from __future__ import annotations

from typing import Any, Iterator, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dailybudget.storage.base import BlobStore
from dailybudget.utils.logging_config import short_key


class _Record(BaseModel):
    # Stored documents use the camelCase field names of the client API.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SubscriptionRecord(_Record):
    """A registered push subscription and its reminder preferences."""

    endpoint: str
    subscription: dict[str, Any]
    timezone: Optional[str] = None
    schedule: Optional[list[str]] = None
    created_at: Optional[int] = Field(default=None, alias="createdAt")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")


class BudgetSnapshotRecord(_Record):
    """Latest budget figures reported by the client for one subscription."""

    daily_budget: float = Field(default=0, alias="dailyBudget")
    remaining_budget: float = Field(default=0, alias="remainingBudget")
    remaining_days: int = Field(default=0, alias="remainingDays")
    schedule: Optional[list[str]] = None
    timezone: Optional[str] = None
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")


class _RecordStore:
    record_type: type[_Record]

    def __init__(self, blobs: BlobStore) -> None:
        self.blobs = blobs

    def get(self, key: str):
        document = self.blobs.get(key)
        if document is None:
            return None
        return self.record_type.model_validate(document)

    def set(self, key: str, record: _Record) -> None:
        self.blobs.set(key, record.to_document())

    def delete(self, key: str) -> None:
        self.blobs.delete(key)

    def iter_records(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(key, record)`` pairs, skipping documents that fail to parse."""

        for key, document in self.blobs.iter_items():
            try:
                yield key, self.record_type.model_validate(document)
            except PydanticValidationError as exc:
                logger.warning(
                    "Skipping unreadable record",
                    namespace=self.blobs.namespace,
                    key=short_key(key),
                    error=str(exc),
                )


class SubscriptionStore(_RecordStore):
    record_type = SubscriptionRecord

    def get(self, key: str) -> SubscriptionRecord | None:
        return super().get(key)


class BudgetStore(_RecordStore):
    record_type = BudgetSnapshotRecord

    def get(self, key: str) -> BudgetSnapshotRecord | None:
        return super().get(key)
