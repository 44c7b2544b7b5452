"""Issue photo classification with the Gemini generateContent API."""

from __future__ import annotations

import base64
import json
import math
import re
from typing import Any

import httpx

from civic_admin.application.dtos.image_analysis import ImageAnalysis
from civic_admin.domain.enums import Severity
from civic_admin.domain.exceptions import (
    ExternalServiceException,
    ImageAnalysisNotConfiguredException,
)
from civic_admin.shared.logging import get_logger
from civic_admin.shared.utils.datetime import utc_now

logger = get_logger(__name__)

KNOWN_CATEGORIES = ["Garbage", "Water Leak", "Roads", "Streetlight", "Pollution", "Other"]

CATEGORY_MAP: dict[str, str] = {
    "garbage": "Garbage",
    "trash": "Garbage",
    "waste": "Garbage",
    "litter": "Garbage",
    "dump": "Garbage",
    "water": "Water Leak",
    "leak": "Water Leak",
    "flooding": "Water Leak",
    "sewage": "Water Leak",
    "drain": "Water Leak",
    "road": "Roads",
    "pothole": "Roads",
    "crack": "Roads",
    "pavement": "Roads",
    "asphalt": "Roads",
    "light": "Streetlight",
    "streetlight": "Streetlight",
    "lamp": "Streetlight",
    "pole": "Streetlight",
    "pollution": "Pollution",
    "smoke": "Pollution",
    "air": "Pollution",
    "dust": "Pollution",
}

ANALYSIS_PROMPT = f"""You are a civic issue classifier for a city complaint system. Analyze this image of a civic issue and respond ONLY with a valid JSON object (no markdown, no code fences).

Categories: {", ".join(KNOWN_CATEGORIES)}

Respond with this exact JSON structure:
{{"suggestedCategory":"<one of the categories>","confidence":0.85,"description":"<one sentence describing the issue>","severity":"<low|medium|high|critical>","tags":["tag1","tag2"]}}

Rules:
- confidence should be between 0.0 and 1.0
- severity: low (minor inconvenience), medium (needs attention), high (safety concern), critical (immediate danger)
- tags: 2-5 keywords describing what you see
- If unsure about category, use "Other" with lower confidence"""

_DATA_URI_RE = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)
_FENCE_RE = re.compile(r"```(?:json)?\s*")


def fallback_analysis() -> ImageAnalysis:
    return ImageAnalysis(
        category="Other",
        confidence=0.0,
        description="AI analysis could not parse the image",
        severity=Severity.MEDIUM,
        tags=[],
        analyzed_at=utc_now(),
    )


def normalize_category(raw: Any) -> str:
    """Known category as-is, else keyword lookup, else Other."""
    if isinstance(raw, str):
        if raw in KNOWN_CATEGORIES:
            return raw
        return CATEGORY_MAP.get(raw.strip().lower(), "Other")
    return "Other"


def parse_analysis(text: str) -> ImageAnalysis:
    """Parse the model reply; anything unusable yields the fallback result."""
    cleaned = _FENCE_RE.sub("", text).strip()
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        logger.warning("Could not parse image analysis reply: %r", text[:200])
        return fallback_analysis()
    if not isinstance(parsed, dict):
        return fallback_analysis()
    try:
        confidence = float(parsed.get("confidence", 0))
    except (TypeError, ValueError):
        confidence = 0.0
    if not math.isfinite(confidence):
        confidence = 0.0
    severity_raw = str(parsed.get("severity", "")).lower()
    severity = Severity(severity_raw) if severity_raw in Severity.values() else Severity.MEDIUM
    tags = parsed.get("tags")
    return ImageAnalysis(
        category=normalize_category(parsed.get("suggestedCategory")),
        confidence=max(0.0, min(1.0, confidence)),
        description=str(parsed.get("description") or ""),
        severity=severity,
        tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        analyzed_at=utc_now(),
    )


class GeminiImageAnalyzer:
    """IImageAnalyzer backed by Gemini. Accepts data URIs or http(s) image URLs."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str | None,
        model: str,
        base_url: str,
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def _load_image(self, image_url: str) -> tuple[str, str]:
        """Return (mime type, base64 data) for the image."""
        match = _DATA_URI_RE.match(image_url)
        if match:
            return match.group(1), image_url[match.end():]
        try:
            response = await self._http.get(image_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ExternalServiceException("image download", str(e) or type(e).__name__) from e
        mime = response.headers.get("content-type", "image/jpeg").split(";")[0]
        return mime, base64.standard_b64encode(response.content).decode("ascii")

    async def analyze(self, image_url: str) -> ImageAnalysis:
        if not self.enabled:
            raise ImageAnalysisNotConfiguredException()
        mime, data = await self._load_image(image_url)
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": ANALYSIS_PROMPT},
                        {"inlineData": {"mimeType": mime, "data": data}},
                    ]
                }
            ],
            "generationConfig": {"temperature": 0.2, "maxOutputTokens": 300},
        }
        url = f"{self._base_url}/models/{self._model}:generateContent"
        try:
            response = await self._http.post(url, params={"key": self._api_key}, json=body)
        except httpx.HTTPError as e:
            raise ExternalServiceException("gemini", str(e) or type(e).__name__) from e
        if response.status_code != 200:
            logger.error("Gemini request failed: status=%d", response.status_code)
            raise ExternalServiceException("gemini", f"HTTP {response.status_code}")
        try:
            payload = response.json()
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except ValueError:
            logger.warning("Gemini returned a non-JSON body")
            text = ""
        except (KeyError, IndexError, TypeError):
            text = ""
        return parse_analysis(text)
