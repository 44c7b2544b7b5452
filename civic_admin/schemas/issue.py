"""Issue API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from civic_admin.domain.enums import CommentType, IssuePriority, IssueStatus, Severity


class IssueLocationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    latitude: float
    longitude: float


class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    status: IssueStatus
    priority: IssuePriority
    category: str
    address: str
    location: IssueLocationSchema | None = None
    reported_by: str
    reported_by_id: str | None = None
    assigned_department: str
    admin_notes: str
    image_url: str | None = None
    reported_at: datetime | None = None
    last_updated: datetime | None = None
    duplicate_of_id: str | None = None
    duplicate_score: float | None = None
    ai_analysis: dict[str, Any] | None = None


class IssueListResponse(BaseModel):
    items: list[IssueResponse]
    total: int
    skip: int
    limit: int


class IssueUpdateRequest(BaseModel):
    """Partial update. An empty ``assigned_department`` unassigns the issue."""

    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    assigned_department: str | None = Field(default=None, max_length=200)
    admin_notes: str | None = Field(default=None, max_length=5000)


class StatusChangeRequest(BaseModel):
    status: IssueStatus


class BulkUpdateRequest(BaseModel):
    issue_ids: list[str] = Field(..., min_length=1, max_length=500)
    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    assigned_department: str | None = Field(default=None, max_length=200)


class BulkUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    updated: list[str]
    not_found: list[str]


class CommentCreateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    text: str
    author: str
    author_email: str
    type: CommentType
    created_at: datetime | None = None


class DuplicateMatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    issue_id: str
    title: str
    score: float
    distance_meters: int


class SlaStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    issue_id: str
    priority: str
    deadline_hours: int
    elapsed_hours: float
    remaining_hours: float
    done: bool
    breached: bool
    at_risk: bool


class ImageAnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    confidence: float
    description: str
    severity: Severity
    tags: list[str]
    analyzed_at: datetime | None = None


class BulkAssignResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    assigned: int
    scanned: int
