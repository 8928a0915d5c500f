"""API endpoint modules for v1."""

from dailybudget.api.v1.endpoints import push

__all__ = ["push"]
