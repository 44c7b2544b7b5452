"""Presentation-layer dependency injection (composition root).

Routes depend on these callables only, never on infrastructure directly.
"""

from civic_admin.api.v1.dependencies.auth import (
    AdminUser,
    StaffUser,
    get_current_staff,
    require_admin,
)
from civic_admin.api.v1.dependencies.services import (
    get_analytics_service,
    get_auto_assign_service,
    get_automation_engine,
    get_department_service,
    get_image_analysis_service,
    get_issue_service,
    get_notification_service,
    get_services,
    get_user_service,
)

__all__ = [
    "AdminUser",
    "StaffUser",
    "get_analytics_service",
    "get_auto_assign_service",
    "get_automation_engine",
    "get_current_staff",
    "get_department_service",
    "get_image_analysis_service",
    "get_issue_service",
    "get_notification_service",
    "get_services",
    "get_user_service",
    "require_admin",
]
