"""Expo push notification sender (implements IPushSender)."""

from __future__ import annotations

from typing import Any

import httpx

from civic_admin.application.dtos.notification import PushResult
from civic_admin.shared.logging import get_logger

logger = get_logger(__name__)

EXPO_TOKEN_PREFIX = "ExponentPushToken"
# Expo accepts at most 100 messages per request.
_CHUNK_SIZE = 100


def is_expo_token(token: str | None) -> bool:
    return bool(token) and token.startswith(EXPO_TOKEN_PREFIX)


class ExpoPushSender:
    """Sends push messages through the Expo push API over a shared httpx client.

    Delivery problems never raise: they come back as failures in PushResult
    so the caller can still record the attempt.
    """

    def __init__(self, http_client: httpx.AsyncClient, push_url: str) -> None:
        self._http = http_client
        self._url = push_url

    async def send(
        self,
        tokens: list[str],
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> PushResult:
        """Send one message per valid token.

        Tokens that are not Expo tokens are not sent and count as failures.
        """
        valid = [t for t in tokens if is_expo_token(t)]
        skipped = len(tokens) - len(valid)
        if not valid:
            return PushResult(success=0, failure=skipped, errors=["No valid Expo push tokens"])

        success = 0
        failure = skipped
        errors: list[str] = []
        for start in range(0, len(valid), _CHUNK_SIZE):
            chunk = valid[start : start + _CHUNK_SIZE]
            messages = [
                {
                    "to": token,
                    "sound": "default",
                    "title": title,
                    "body": body,
                    "data": data or {},
                    "priority": "high",
                    "channelId": "default",
                }
                for token in chunk
            ]
            try:
                response = await self._http.post(
                    self._url,
                    json=messages,
                    headers={
                        "Accept": "application/json",
                        "Accept-Encoding": "gzip, deflate",
                    },
                )
                payload = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("Expo push request failed: %s", e)
                failure += len(chunk)
                errors.append(str(e) or type(e).__name__)
                continue
            if response.status_code != 200:
                logger.warning("Expo push returned status=%d", response.status_code)
                failure += len(chunk)
                errors.append(f"HTTP {response.status_code}")
                continue
            tickets = payload.get("data") if isinstance(payload, dict) else None
            if not isinstance(tickets, list):
                tickets = [tickets]
            ok = sum(1 for t in tickets if isinstance(t, dict) and t.get("status") == "ok")
            success += ok
            failure += len(chunk) - ok
            errors.extend(
                str(t.get("message"))
                for t in tickets
                if isinstance(t, dict) and t.get("status") == "error" and t.get("message")
            )
        logger.info("Expo push sent: success=%d failure=%d", success, failure)
        return PushResult(success=success, failure=failure, errors=errors)
