"""Tests for NotificationTemplateRenderer (Jinja texts with built-in fallbacks)."""

import pytest

from civic_admin.infrastructure.services.notification_template_renderer import (
    NotificationTemplateRenderer,
)

CONTEXT = {
    "title": "Broken lamp",
    "status": "Resolved",
    "priority": "Low",
    "category": "Streetlight",
    "assigned_department": "Electrical",
}


def test_default_texts_per_trigger() -> None:
    renderer = NotificationTemplateRenderer()
    assert renderer.render("issue_assigned", CONTEXT) == (
        "Issue Assigned to Your Department",
        '"Broken lamp" assigned to Electrical',
    )
    assert renderer.render("comment_added", CONTEXT)[1] == (
        'There is a new update on "Broken lamp"'
    )


def test_custom_template() -> None:
    renderer = NotificationTemplateRenderer()
    title, body = renderer.render(
        "status_changed", CONTEXT, "{{ issue.category }} fixed", "{{ issue.title }} is {{ issue.status }}"
    )
    assert (title, body) == ("Streetlight fixed", "Broken lamp is Resolved")


def test_broken_template_uses_default() -> None:
    renderer = NotificationTemplateRenderer()
    title, _ = renderer.render("status_changed", CONTEXT, "{{ issue.title ", "body")
    assert title == "Issue Status Updated"


def test_unknown_trigger_without_template() -> None:
    with pytest.raises(KeyError):
        NotificationTemplateRenderer().render("issue_deleted", CONTEXT)


def test_template_cannot_reach_python_internals() -> None:
    renderer = NotificationTemplateRenderer()
    title, body = renderer.render(
        "issue_created",
        CONTEXT,
        "{{ cycler.__init__.__globals__.os.getpid() }}",
        "{{ issue.title.__class__.__mro__[1].__subclasses__() }}",
    )
    assert (title, body) == ("New Issue Reported", '"Broken lamp" - Streetlight (Low)')
