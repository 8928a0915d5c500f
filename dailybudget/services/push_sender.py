"""Service for handling Web Push delivery."""
from __future__ import annotations

from typing import Any

import requests
from loguru import logger
from pywebpush import WebPushException, webpush

from dailybudget.config import settings
from dailybudget.core.payloads import PushPayload
from dailybudget.utils.exceptions import ConfigurationError, PushDeliveryError


class PushSender:
    """Sends one encrypted message to one stored push subscription."""

    def __init__(
        self,
        public_key: str | None = None,
        private_key: str | None = None,
        subject: str | None = None,
        timeout: float | None = None,
        ttl: int | None = None,
    ):
        self.public_key = settings.VAPID_PUBLIC_KEY if public_key is None else public_key
        self.private_key = settings.VAPID_PRIVATE_KEY if private_key is None else private_key
        self.subject = subject or settings.VAPID_SUBJECT
        self.timeout = timeout or settings.PUSH_TIMEOUT_SECONDS
        self.ttl = settings.PUSH_TTL_SECONDS if ttl is None else ttl

    @property
    def configured(self) -> bool:
        return bool(self.public_key and self.private_key)

    def ensure_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError("VAPID keys missing")

    def send(self, subscription: dict[str, Any], payload: PushPayload | str) -> None:
        """Hand ``payload`` to the push service; raise ``PushDeliveryError`` on rejection.

        Acceptance by the push service is all that is confirmed, not delivery
        to the device.
        """

        self.ensure_configured()
        data = payload.to_json() if isinstance(payload, PushPayload) else payload
        try:
            webpush(
                subscription_info=subscription,
                data=data,
                vapid_private_key=self.private_key,
                # pywebpush adds aud/exp to the claims dict, so build it per call
                vapid_claims={"sub": self.subject},
                timeout=self.timeout,
                ttl=self.ttl,
            )
        except WebPushException as ex:
            status = ex.response.status_code if ex.response is not None else None
            raise PushDeliveryError(str(ex), status_code=status) from ex
        except requests.RequestException as ex:
            logger.warning("Push service unreachable", error=str(ex))
            raise PushDeliveryError(f"Push service unreachable: {ex}") from ex
        except (KeyError, TypeError, ValueError) as ex:
            raise PushDeliveryError(f"Invalid subscription: {ex}") from ex
