"""Subscription keys and HMAC bearer tokens derived from push endpoints."""
from __future__ import annotations

import base64
import hashlib
import hmac

from dailybudget.config import settings
from dailybudget.utils.exceptions import ConfigurationError


def _secret(secret: str | None) -> bytes:
    value = settings.HMAC_SECRET if secret is None else secret
    if not value:
        raise ConfigurationError("HMAC secret missing")
    return value.encode("utf-8")


def derive_key(endpoint: str) -> str:
    """Return the storage key for an endpoint: its SHA-256 hex digest."""

    return hashlib.sha256(endpoint.encode("utf-8")).hexdigest()


def issue_token(endpoint: str, secret: str | None = None) -> str:
    """Return the bearer token authorizing calls for ``endpoint``.

    The token is an unpadded base64url HMAC-SHA256 of the endpoint, so the same
    endpoint always yields the same token and nothing per-subscriber is stored.
    Raises ``ConfigurationError`` when no secret is configured.
    """

    digest = hmac.new(_secret(secret), endpoint.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def verify_token(endpoint: str, token: str, secret: str | None = None) -> bool:
    """Check ``token`` against ``endpoint`` in constant time."""

    expected = issue_token(endpoint, secret)
    return hmac.compare_digest(expected.encode("ascii"), token.encode("utf-8"))
