"""DTO for image classification results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from civic_admin.domain.enums import Severity


@dataclass(frozen=True)
class ImageAnalysis:
    category: str
    confidence: float
    description: str
    severity: Severity = Severity.MEDIUM
    tags: list[str] = field(default_factory=list)
    analyzed_at: datetime | None = None

    def to_document(self) -> dict[str, Any]:
        """Map stored on the issue as ``aiAnalysis``."""
        return {
            "category": self.category,
            "confidence": self.confidence,
            "description": self.description,
            "severity": self.severity.value,
            "tags": list(self.tags),
            "analyzedAt": self.analyzed_at,
        }
