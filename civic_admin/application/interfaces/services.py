"""Service interfaces (ports) for the application layer.

Protocols define contracts for outbound integrations (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from civic_admin.application.dtos.image_analysis import ImageAnalysis
    from civic_admin.application.dtos.notification import PushResult


class IPushSender(Protocol):
    """Protocol for the mobile push gateway."""

    async def send(
        self,
        tokens: list[str],
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> PushResult:
        """Send one message to every token. Never raises for delivery failures."""


class IImageAnalyzer(Protocol):
    """Protocol for issue photo classification."""

    @property
    def enabled(self) -> bool:
        """True when the analyzer is configured."""

    async def analyze(self, image_url: str) -> ImageAnalysis:
        """Classify the image. Raises ExternalServiceException on API failure."""


class INotificationTemplateRenderer(Protocol):
    """Protocol for rendering automation notification texts."""

    def render(
        self,
        trigger: str,
        context: dict[str, Any],
        title: str | None = None,
        body: str | None = None,
    ) -> tuple[str, str]:
        """Return (title, body); built-in text when no template is given."""
