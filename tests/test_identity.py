"""Tests for subscription keys and bearer tokens."""
from __future__ import annotations

import hashlib

import pytest

from dailybudget.config import settings
from dailybudget.core.identity import derive_key, issue_token, verify_token
from dailybudget.utils.exceptions import ConfigurationError

ENDPOINT = "https://fcm.googleapis.com/fcm/send/abc123"


def test_derive_key_is_sha256_hex_of_endpoint() -> None:
    key = derive_key(ENDPOINT)

    assert key == hashlib.sha256(ENDPOINT.encode()).hexdigest()
    assert key == derive_key(ENDPOINT)
    assert key != derive_key(ENDPOINT + "x")


def test_issue_token_is_deterministic_and_url_safe() -> None:
    token = issue_token(ENDPOINT)

    assert token == issue_token(ENDPOINT)
    assert "=" not in token and "+" not in token and "/" not in token
    assert len(token) == 43  # 32 bytes, unpadded base64url


def test_token_depends_on_secret() -> None:
    assert issue_token(ENDPOINT, secret="one") != issue_token(ENDPOINT, secret="two")


def test_verify_token_accepts_only_its_own_endpoint() -> None:
    token = issue_token(ENDPOINT)

    assert verify_token(ENDPOINT, token) is True
    assert verify_token(ENDPOINT[:-1] + "4", token) is False
    assert verify_token("https://updates.push.services.mozilla.com/wpush/v2/x", token) is False
    assert verify_token(ENDPOINT, token[:-1]) is False
    assert verify_token(ENDPOINT, "") is False


def test_missing_secret_fails_closed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "HMAC_SECRET", "")

    with pytest.raises(ConfigurationError):
        issue_token(ENDPOINT)
    with pytest.raises(ConfigurationError):
        verify_token(ENDPOINT, "anything")
