"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get
their services from civic_admin.api.v1.dependencies.
"""

from fastapi import APIRouter

from civic_admin.api.v1.endpoints import (
    analytics,
    assignment_rules,
    automation_rules,
    departments,
    health,
    issues,
    notifications,
    templates,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(issues.router, prefix="/issues", tags=["issues"])
api_router.include_router(departments.router, prefix="/departments", tags=["departments"])
api_router.include_router(
    assignment_rules.router, prefix="/assignment-rules", tags=["assignment-rules"]
)
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(
    automation_rules.router, prefix="/automation-rules", tags=["automation-rules"]
)
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
