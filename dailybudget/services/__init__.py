"""Business services package."""

from dailybudget.services.push_sender import PushSender
from dailybudget.services.reminders import ReminderDispatcher, SweepResult
from dailybudget.services.subscriptions import SubscriptionService

__all__ = ["PushSender", "ReminderDispatcher", "SubscriptionService", "SweepResult"]
