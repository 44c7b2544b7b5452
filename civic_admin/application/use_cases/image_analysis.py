"""Classify an issue photo and store the result on the issue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from civic_admin.domain.exceptions import (
    ImageAnalysisNotConfiguredException,
    ResourceNotFoundException,
    ValidationException,
)
from civic_admin.shared.logging import get_logger

if TYPE_CHECKING:
    from civic_admin.application.dtos.image_analysis import ImageAnalysis
    from civic_admin.application.interfaces.repositories import IIssueRepository
    from civic_admin.application.interfaces.services import IImageAnalyzer
    from civic_admin.domain.entities import Issue

logger = get_logger(__name__)


class ImageAnalysisService:
    def __init__(self, issue_repo: IIssueRepository, analyzer: IImageAnalyzer) -> None:
        self.issue_repo = issue_repo
        self.analyzer = analyzer

    @property
    def enabled(self) -> bool:
        return self.analyzer.enabled

    async def analyze(self, issue: Issue) -> ImageAnalysis:
        """Run the analyzer on the issue image and store it as ``aiAnalysis``."""
        if not self.analyzer.enabled:
            raise ImageAnalysisNotConfiguredException()
        if not issue.image_url:
            raise ValidationException("Issue has no image to analyze", field="image")
        result = await self.analyzer.analyze(issue.image_url)
        await self.issue_repo.set_ai_analysis(issue.id, result.to_document())
        logger.info(
            "Image analysis for issue %s: %s (%.2f)", issue.id, result.category, result.confidence
        )
        return result

    async def analyze_by_id(self, issue_id: str) -> ImageAnalysis:
        issue = await self.issue_repo.get_by_id(issue_id)
        if issue is None:
            raise ResourceNotFoundException("issue", issue_id)
        return await self.analyze(issue)
