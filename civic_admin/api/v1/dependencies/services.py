"""Use case dependencies built on the shared Firestore and HTTP clients."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from civic_admin.application.use_cases.analytics import AnalyticsService
from civic_admin.application.use_cases.auto_assign import AutoAssignService
from civic_admin.application.use_cases.automation import AutomationEngine
from civic_admin.application.use_cases.departments import DepartmentService
from civic_admin.application.use_cases.image_analysis import ImageAnalysisService
from civic_admin.application.use_cases.issues import IssueService
from civic_admin.application.use_cases.notifications import NotificationService
from civic_admin.application.use_cases.users import UserService
from civic_admin.core.container import Services, build_services
from civic_admin.infrastructure.firebase.client import get_firestore_client


def get_services(request: Request) -> Services:
    """All use cases for this request; 503 when Firestore is not configured."""
    client = get_firestore_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Data store is not configured")
    return build_services(client, request.app.state.http_client)


ServicesDep = Annotated[Services, Depends(get_services)]


def get_issue_service(services: ServicesDep) -> IssueService:
    return services.issues


def get_department_service(services: ServicesDep) -> DepartmentService:
    return services.departments


def get_user_service(services: ServicesDep) -> UserService:
    return services.users


def get_notification_service(services: ServicesDep) -> NotificationService:
    return services.notifications


def get_automation_engine(services: ServicesDep) -> AutomationEngine:
    return services.automation


def get_auto_assign_service(services: ServicesDep) -> AutoAssignService:
    return services.auto_assign


def get_analytics_service(services: ServicesDep) -> AnalyticsService:
    return services.analytics


def get_image_analysis_service(services: ServicesDep) -> ImageAnalysisService:
    return services.image_analysis
