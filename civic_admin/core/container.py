"""Builds application services from infrastructure implementations.

Shared by the API dependencies, the background worker and the scripts so
the object graph is wired in one place.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from civic_admin.application.use_cases.analytics import AnalyticsService
from civic_admin.application.use_cases.auto_assign import AutoAssignService
from civic_admin.application.use_cases.automation import AutomationEngine
from civic_admin.application.use_cases.departments import DepartmentService
from civic_admin.application.use_cases.image_analysis import ImageAnalysisService
from civic_admin.application.use_cases.issues import IssueService
from civic_admin.application.use_cases.notifications import NotificationService
from civic_admin.application.use_cases.users import UserService
from civic_admin.core.config import Settings, get_settings
from civic_admin.infrastructure.external.ai.gemini_image_analyzer import GeminiImageAnalyzer
from civic_admin.infrastructure.external.push.expo_push_sender import ExpoPushSender
from civic_admin.infrastructure.firebase._rest_client import FirestoreRESTClient
from civic_admin.infrastructure.firebase.repositories.department_repo_firestore import (
    FirestoreAssignmentRuleRepository,
    FirestoreDepartmentRepository,
)
from civic_admin.infrastructure.firebase.repositories.issue_repo_firestore import (
    FirestoreIssueRepository,
)
from civic_admin.infrastructure.firebase.repositories.notification_repo_firestore import (
    FirestoreAutomationRuleRepository,
    FirestoreNotificationLogRepository,
    FirestoreTemplateRepository,
)
from civic_admin.infrastructure.firebase.repositories.user_repo_firestore import (
    FirestoreUserRepository,
)
from civic_admin.infrastructure.services.notification_template_renderer import (
    NotificationTemplateRenderer,
)


@dataclass
class Services:
    issues: IssueService
    departments: DepartmentService
    users: UserService
    notifications: NotificationService
    automation: AutomationEngine
    auto_assign: AutoAssignService
    analytics: AnalyticsService
    image_analysis: ImageAnalysisService


def build_services(
    client: FirestoreRESTClient,
    http_client: httpx.AsyncClient,
    settings: Settings | None = None,
) -> Services:
    """Wire every use case against Firestore and the outbound HTTP client."""
    settings = settings or get_settings()
    issue_repo = FirestoreIssueRepository(client)
    department_repo = FirestoreDepartmentRepository(client)
    rule_repo = FirestoreAssignmentRuleRepository(client)
    user_repo = FirestoreUserRepository(client)
    template_repo = FirestoreTemplateRepository(client)

    notifications = NotificationService(
        user_repo,
        FirestoreNotificationLogRepository(client),
        template_repo,
        ExpoPushSender(http_client, settings.expo_push_url),
    )
    automation = AutomationEngine(
        FirestoreAutomationRuleRepository(client),
        template_repo,
        user_repo,
        notifications,
        NotificationTemplateRenderer(),
    )
    gemini_key = settings.gemini_api_key.get_secret_value() if settings.gemini_api_key else None
    image_analysis = ImageAnalysisService(
        issue_repo,
        GeminiImageAnalyzer(
            http_client, gemini_key, settings.gemini_model, settings.gemini_base_url
        ),
    )
    return Services(
        issues=IssueService(issue_repo, automation),
        departments=DepartmentService(department_repo, rule_repo, issue_repo),
        users=UserService(user_repo, issue_repo),
        notifications=notifications,
        automation=automation,
        auto_assign=AutoAssignService(
            issue_repo, department_repo, rule_repo, automation, image_analysis
        ),
        analytics=AnalyticsService(issue_repo),
        image_analysis=image_analysis,
    )
