"""Department and auto-assignment rule API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from civic_admin.domain.enums import IssuePriority


class DepartmentCreateRequest(BaseModel):
    """``keywords`` may be a list or a comma-separated string."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    head: str = ""
    email: str = ""
    phone: str = ""
    working_hours: str = ""
    keywords: list[str] | str = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    active: bool = True


class DepartmentUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    head: str | None = None
    email: str | None = None
    phone: str | None = None
    working_hours: str | None = None
    keywords: list[str] | str | None = None
    categories: list[str] | None = None
    active: bool | None = None


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    head: str
    email: str
    phone: str
    working_hours: str
    keywords: list[str]
    categories: list[str]
    active: bool
    issues_assigned: int
    issues_resolved: int


class DepartmentStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    department: str
    total: int
    open: int
    in_progress: int
    resolved: int
    resolve_rate: int
    avg_response_time: float | None = None


class AssignmentRuleCreateRequest(BaseModel):
    category: str = Field(..., min_length=1, max_length=100)
    department: str = Field(..., min_length=1, max_length=200)
    priority: IssuePriority = IssuePriority.MEDIUM
    enabled: bool = True


class AssignmentRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category: str
    department: str
    priority: IssuePriority
    enabled: bool
