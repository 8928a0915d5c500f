"""Database models package."""

from dailybudget.db.models.blob import BlobEntry

__all__ = ["BlobEntry"]
