"""Version 1 of the HTTP API."""

from dailybudget.api.v1.api import api_router

__all__ = ["api_router"]
