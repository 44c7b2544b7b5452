"""Tests for Gemini reply parsing and the analyzer HTTP flow."""

import json

import httpx
import pytest

from civic_admin.domain.enums import Severity
from civic_admin.domain.exceptions import (
    ExternalServiceException,
    ImageAnalysisNotConfiguredException,
)
from civic_admin.infrastructure.external.ai.gemini_image_analyzer import (
    GeminiImageAnalyzer,
    normalize_category,
    parse_analysis,
)

BASE = "https://generativelanguage.googleapis.com/v1beta"


def _analyzer(handler, api_key: str | None = "key") -> GeminiImageAnalyzer:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiImageAnalyzer(http, api_key, "gemini-2.0-flash", BASE)


class TestParseAnalysis:
    def test_fenced_json(self) -> None:
        reply = (
            "```json\n"
            '{"suggestedCategory":"Roads","confidence":0.92,"description":"Pothole",'
            '"severity":"HIGH","tags":["pothole","asphalt"]}\n```'
        )
        result = parse_analysis(reply)
        assert result.category == "Roads"
        assert result.confidence == 0.92
        assert result.severity == Severity.HIGH
        assert result.tags == ["pothole", "asphalt"]

    def test_confidence_clamped_and_unknown_severity(self) -> None:
        result = parse_analysis('{"suggestedCategory":"trash","confidence":4,"severity":"extreme"}')
        assert result.category == "Garbage"
        assert result.confidence == 1.0
        assert result.severity == Severity.MEDIUM

    def test_non_numeric_confidence_is_zero(self) -> None:
        assert parse_analysis('{"suggestedCategory":"Roads","confidence":"nan"}').confidence == 0.0
        assert parse_analysis('{"suggestedCategory":"Roads","confidence":NaN}').confidence == 0.0

    def test_unparseable_gives_fallback(self) -> None:
        result = parse_analysis("I cannot see an image")
        assert result.category == "Other"
        assert result.confidence == 0.0
        assert result.description == "AI analysis could not parse the image"

    def test_normalize_category(self) -> None:
        assert normalize_category("Streetlight") == "Streetlight"
        assert normalize_category(" Pothole ") == "Roads"
        assert normalize_category("volcano") == "Other"
        assert normalize_category(None) == "Other"


class TestAnalyzer:
    async def test_data_uri_sent_inline(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["key"] == "key"
            assert request.url.path.endswith("/models/gemini-2.0-flash:generateContent")
            bodies.append(json.loads(request.content))
            text = '{"suggestedCategory":"Water Leak","confidence":0.7,"severity":"low"}'
            return httpx.Response(
                200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
            )

        result = await _analyzer(handler).analyze("data:image/png;base64,iVBORw0KGgo=")
        inline = bodies[0]["contents"][0]["parts"][1]["inlineData"]
        assert inline == {"mimeType": "image/png", "data": "iVBORw0KGgo="}
        assert result.category == "Water Leak"

    async def test_remote_image_is_downloaded(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, content=b"\xff\xd8", headers={"content-type": "image/jpeg"})
            return httpx.Response(200, json={"candidates": []})

        result = await _analyzer(handler).analyze("https://cdn.example/1.jpg")
        assert result.category == "Other"

    async def test_non_json_reply_gives_fallback(self) -> None:
        analyzer = _analyzer(lambda r: httpx.Response(200, text="<html>busy</html>"))
        result = await analyzer.analyze("data:image/png;base64,AAAA")
        assert result.category == "Other"
        assert result.confidence == 0.0

    async def test_api_error(self) -> None:
        with pytest.raises(ExternalServiceException):
            await _analyzer(lambda r: httpx.Response(429, json={})).analyze(
                "data:image/png;base64,AAAA"
            )

    async def test_without_key(self) -> None:
        analyzer = _analyzer(lambda r: httpx.Response(200), api_key=None)
        assert not analyzer.enabled
        with pytest.raises(ImageAnalysisNotConfiguredException):
            await analyzer.analyze("data:image/png;base64,AAAA")
