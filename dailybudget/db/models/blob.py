"""Generic namespaced JSON blob rows backing the key-value stores."""
from sqlalchemy import BigInteger, Column, DateTime, String, Text
from sqlalchemy.sql import func

from dailybudget.db.base import Base


class BlobEntry(Base):
    """One JSON document stored under ``(namespace, key)``."""

    __tablename__ = "blobs"

    namespace = Column(String(64), primary_key=True)
    key = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)
    # Epoch milliseconds; only delivery markers expire.
    expires_at = Column(BigInteger, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
