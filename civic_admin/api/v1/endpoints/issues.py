"""Issue API: triage, comments, duplicates, image analysis, export and SLA."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from civic_admin.api.v1.dependencies import (
    AdminUser,
    StaffUser,
    get_auto_assign_service,
    get_image_analysis_service,
    get_issue_service,
)
from civic_admin.application.dtos.issue import IssueFilter, IssueUpdate
from civic_admin.application.use_cases.auto_assign import AutoAssignService
from civic_admin.application.use_cases.image_analysis import ImageAnalysisService
from civic_admin.application.use_cases.issues import IssueService
from civic_admin.core.limiter import limit_writes
from civic_admin.domain.enums import IssuePriority, IssueStatus
from civic_admin.schemas.issue import (
    BulkUpdateRequest,
    BulkUpdateResponse,
    CommentCreateRequest,
    CommentResponse,
    DuplicateMatchResponse,
    ImageAnalysisResponse,
    IssueListResponse,
    IssueResponse,
    IssueUpdateRequest,
    SlaStatusResponse,
    StatusChangeRequest,
)
from civic_admin.shared.utils.datetime import utc_now

router = APIRouter()

IssueServiceDep = Annotated[IssueService, Depends(get_issue_service)]


def _issue_filter(
    status: IssueStatus | None = None,
    priority: IssuePriority | None = None,
    category: str | None = None,
    department: str | None = None,
    unassigned: bool = False,
    search: str | None = Query(default=None, max_length=200),
) -> IssueFilter:
    return IssueFilter(
        status=status,
        priority=priority,
        category=category,
        department=department,
        unassigned=unassigned,
        search=search,
    )


FilterDep = Annotated[IssueFilter, Depends(_issue_filter)]


@router.get("", response_model=IssueListResponse)
async def list_issues(
    _: StaffUser,
    service: IssueServiceDep,
    f: FilterDep,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=500),
):
    """List issues newest first."""
    items, total = await service.list_issues(f, skip=skip, limit=limit)
    return IssueListResponse(
        items=[IssueResponse.model_validate(i) for i in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/map", response_model=list[IssueResponse])
async def map_issues(_: StaffUser, service: IssueServiceDep, f: FilterDep):
    """Issues that carry coordinates."""
    return [IssueResponse.model_validate(i) for i in await service.map_issues(f)]


@router.get("/export")
async def export_issues(_: StaffUser, service: IssueServiceDep, f: FilterDep) -> Response:
    """CSV download of the filtered issues."""
    filename = f"issues-{utc_now().date().isoformat()}.csv"
    return Response(
        content=await service.export_csv(f),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/sla", response_model=list[SlaStatusResponse])
async def sla_overview(_: StaffUser, service: IssueServiceDep):
    """Open issues against their priority deadline, most urgent first."""
    return [SlaStatusResponse.model_validate(s) for s in await service.sla_overview(utc_now())]


@router.post("/bulk-update", response_model=BulkUpdateResponse)
@limit_writes
async def bulk_update(
    request: Request,
    body: BulkUpdateRequest,
    staff: StaffUser,
    service: IssueServiceDep,
):
    changes = IssueUpdate(
        status=body.status,
        priority=body.priority,
        assigned_department=body.assigned_department,
    )
    result = await service.bulk_update(body.issue_ids, changes, staff)
    return BulkUpdateResponse.model_validate(result)


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(issue_id: str, _: StaffUser, service: IssueServiceDep):
    return IssueResponse.model_validate(await service.get_issue(issue_id))


@router.patch("/{issue_id}", response_model=IssueResponse)
@limit_writes
async def update_issue(
    request: Request,
    issue_id: str,
    body: IssueUpdateRequest,
    staff: StaffUser,
    service: IssueServiceDep,
):
    """Partial update; status changes are recorded in the comment history."""
    changes = IssueUpdate(**body.model_dump())
    return IssueResponse.model_validate(await service.update_issue(issue_id, changes, staff))


@router.post("/{issue_id}/status", response_model=IssueResponse)
@limit_writes
async def change_status(
    request: Request,
    issue_id: str,
    body: StatusChangeRequest,
    staff: StaffUser,
    service: IssueServiceDep,
):
    return IssueResponse.model_validate(await service.change_status(issue_id, body.status, staff))


@router.delete("/{issue_id}", status_code=204)
@limit_writes
async def delete_issue(
    request: Request, issue_id: str, _: AdminUser, service: IssueServiceDep
) -> Response:
    await service.delete_issue(issue_id)
    return Response(status_code=204)


@router.get("/{issue_id}/comments", response_model=list[CommentResponse])
async def list_comments(issue_id: str, _: StaffUser, service: IssueServiceDep):
    return [CommentResponse.model_validate(c) for c in await service.list_comments(issue_id)]


@router.post("/{issue_id}/comments", response_model=CommentResponse, status_code=201)
@limit_writes
async def add_comment(
    request: Request,
    issue_id: str,
    body: CommentCreateRequest,
    staff: StaffUser,
    service: IssueServiceDep,
):
    return CommentResponse.model_validate(await service.add_comment(issue_id, body.text, staff))


@router.get("/{issue_id}/duplicates", response_model=list[DuplicateMatchResponse])
async def find_duplicates(
    issue_id: str,
    _: StaffUser,
    auto_assign: Annotated[AutoAssignService, Depends(get_auto_assign_service)],
):
    """Nearby recent issues that probably report the same problem."""
    matches = await auto_assign.find_duplicates_for(issue_id)
    return [DuplicateMatchResponse.model_validate(m) for m in matches]


@router.delete("/{issue_id}/duplicate", response_model=IssueResponse)
@limit_writes
async def clear_duplicate(
    request: Request, issue_id: str, _: StaffUser, service: IssueServiceDep
):
    """Remove the duplicate flag after review."""
    return IssueResponse.model_validate(await service.clear_duplicate(issue_id))


@router.post("/{issue_id}/analyze-image", response_model=ImageAnalysisResponse)
@limit_writes
async def analyze_image(
    request: Request,
    issue_id: str,
    _: StaffUser,
    analysis: Annotated[ImageAnalysisService, Depends(get_image_analysis_service)],
):
    """Classify the issue photo and store the result; 503 without an API key."""
    return ImageAnalysisResponse.model_validate(await analysis.analyze_by_id(issue_id))
