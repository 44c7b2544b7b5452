"""Tests for ExpoPushSender with a mocked Expo endpoint."""

import json

import httpx

from civic_admin.infrastructure.external.push.expo_push_sender import (
    ExpoPushSender,
    is_expo_token,
)

PUSH_URL = "https://exp.host/--/api/v2/push/send"


def _sender(handler) -> ExpoPushSender:
    return ExpoPushSender(httpx.AsyncClient(transport=httpx.MockTransport(handler)), PUSH_URL)


def test_is_expo_token() -> None:
    assert is_expo_token("ExponentPushToken[xyz]")
    assert not is_expo_token("fcm:abc")
    assert not is_expo_token(None)


async def test_ticket_statuses_are_counted() -> None:
    sent: list[list[dict]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        messages = json.loads(request.content)
        sent.append(messages)
        return httpx.Response(
            200,
            json={
                "data": [
                    {"status": "ok", "id": "1"},
                    {"status": "error", "message": "DeviceNotRegistered"},
                ]
            },
        )

    result = await _sender(handler).send(
        ["ExponentPushToken[a]", "ExponentPushToken[b]", "not-a-token"],
        "Title",
        "Body",
        {"issueId": "i1"},
    )

    assert result.success == 1
    assert result.failure == 2
    assert result.errors == ["DeviceNotRegistered"]
    assert [m["to"] for m in sent[0]] == ["ExponentPushToken[a]", "ExponentPushToken[b]"]
    assert sent[0][0]["data"] == {"issueId": "i1"}
    assert sent[0][0]["sound"] == "default"


async def test_no_valid_tokens_skips_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    result = await _sender(handler).send(["bad", "worse"], "t", "b")
    assert (result.success, result.failure) == (0, 2)
    assert result.errors == ["No valid Expo push tokens"]


async def test_http_error_status_fails_whole_chunk() -> None:
    result = await _sender(lambda request: httpx.Response(500, json={})).send(
        ["ExponentPushToken[a]", "ExponentPushToken[b]"], "t", "b"
    )
    assert (result.success, result.failure) == (0, 2)
    assert result.errors == ["HTTP 500"]


async def test_transport_error_does_not_raise() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    result = await _sender(handler).send(["ExponentPushToken[a]"], "t", "b")
    assert (result.success, result.failure) == (0, 1)


async def test_large_audiences_are_chunked() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        messages = json.loads(request.content)
        calls.append(len(messages))
        return httpx.Response(200, json={"data": [{"status": "ok"}] * len(messages)})

    tokens = [f"ExponentPushToken[{i}]" for i in range(230)]
    result = await _sender(handler).send(tokens, "t", "b")
    assert calls == [100, 100, 30]
    assert result.success == 230
