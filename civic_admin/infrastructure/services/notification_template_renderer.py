"""Automation notification text: stored templates or built-in defaults (Jinja)."""

from __future__ import annotations

from typing import Any

from jinja2 import Template, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from civic_admin.shared.logging import get_logger

logger = get_logger(__name__)

# Built-in texts per trigger: trigger -> (title_template, body_template).
# Context: issue (see Issue.template_context()).
_DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    "issue_created": (
        "New Issue Reported",
        '"{{ issue.title }}" - {{ issue.category }} ({{ issue.priority }})',
    ),
    "status_changed": (
        "Issue Status Updated",
        '"{{ issue.title }}" is now "{{ issue.status }}"',
    ),
    "issue_assigned": (
        "Issue Assigned to Your Department",
        '"{{ issue.title }}" assigned to {{ issue.assigned_department }}',
    ),
    "priority_changed": (
        "Issue Priority Changed",
        '"{{ issue.title }}" priority set to {{ issue.priority }}',
    ),
    "comment_added": (
        "New Comment on Your Issue",
        'There is a new update on "{{ issue.title }}"',
    ),
}


class NotificationTemplateRenderer:
    """Renders title and body for automation notifications."""

    def __init__(
        self,
        defaults: dict[str, tuple[str, str]] | None = None,
    ) -> None:
        """Initialize with optional default dict; falls back to _DEFAULT_TEMPLATES."""
        # Stored templates are admin-editable data; the sandbox blocks attribute escapes.
        self._env = SandboxedEnvironment(autoescape=False)
        self._defaults: dict[str, tuple[Template, Template]] = {
            key: (self._env.from_string(title), self._env.from_string(body))
            for key, (title, body) in (defaults or _DEFAULT_TEMPLATES).items()
        }

    def render_default(self, trigger: str, context: dict[str, Any]) -> tuple[str, str]:
        """Render the built-in text for a trigger. Raises KeyError if unknown."""
        if trigger not in self._defaults:
            raise KeyError(f"No default notification text for trigger: {trigger}")
        title_tpl, body_tpl = self._defaults[trigger]
        return title_tpl.render(issue=context), body_tpl.render(issue=context)

    def render(
        self,
        trigger: str,
        context: dict[str, Any],
        title: str | None = None,
        body: str | None = None,
    ) -> tuple[str, str]:
        """Render a stored template; a broken, unsafe or missing one falls back to the default."""
        if title is None or body is None:
            return self.render_default(trigger, context)
        try:
            return (
                self._env.from_string(title).render(issue=context),
                self._env.from_string(body).render(issue=context),
            )
        except TemplateError:
            logger.warning("Notification template failed to render; using default text", exc_info=True)
            return self.render_default(trigger, context)
