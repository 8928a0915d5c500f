"""Utility helpers package."""

from dailybudget.utils.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DailyBudgetException,
    PushDeliveryError,
    StorageError,
    SubscriptionNotFoundError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "DailyBudgetException",
    "PushDeliveryError",
    "StorageError",
    "SubscriptionNotFoundError",
    "ValidationError",
]
