"""Validation issue routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from cardops.db.dependencies import get_db
from cardops.errors import AlreadyResolvedError, NotFoundError
from cardops.reconciliation.types import IssueType
from cardops.schemas.common import ApiResponse
from cardops.schemas.validation_issue import (
    IssueSummary,
    ResolveIssueRequest,
    ValidationIssueCreate,
    ValidationIssueRead,
)
from cardops.services.issues import (
    create_issue,
    get_issue,
    list_issues,
    resolve_issue,
    summarize_issues,
)

router = APIRouter(prefix="/validations")


@router.get("", response_model=ApiResponse[list[ValidationIssueRead]])
def get_validation_issues(
    issue_type: IssueType | None = Query(default=None),
    resolved: bool | None = Query(default=None),
    unique_id: str | None = Query(default=None, min_length=1),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ValidationIssueRead]]:
    """List validation issues with simple filters."""

    issues = list_issues(
        db,
        issue_type=issue_type,
        resolved=resolved,
        unique_id=unique_id,
        limit=limit,
        offset=offset,
    )
    return ApiResponse(data=[ValidationIssueRead.model_validate(issue) for issue in issues])


@router.post("", response_model=ApiResponse[ValidationIssueRead], status_code=201)
def post_validation_issue(
    payload: ValidationIssueCreate,
    db: Session = Depends(get_db),
) -> ApiResponse[ValidationIssueRead]:
    """Record a manual validation issue."""

    issue_id = create_issue(db, payload.unique_id.strip(), payload.issue_type, payload.description.strip())
    return ApiResponse(data=ValidationIssueRead.model_validate(get_issue(db, issue_id)))


@router.get("/summary", response_model=ApiResponse[IssueSummary])
def get_validation_summary(db: Session = Depends(get_db)) -> ApiResponse[IssueSummary]:
    """Aggregate issue counts."""

    return ApiResponse(data=summarize_issues(db))


@router.get("/{issue_id}", response_model=ApiResponse[ValidationIssueRead])
def get_validation_issue(
    issue_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ValidationIssueRead]:
    try:
        issue = get_issue(db, issue_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=ValidationIssueRead.model_validate(issue))


@router.put("/{issue_id}/resolve", response_model=ApiResponse[ValidationIssueRead])
def put_resolve_issue(
    payload: ResolveIssueRequest,
    issue_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ValidationIssueRead]:
    """Resolve one open issue; resolving twice is a conflict."""

    try:
        issue = resolve_issue(db, issue_id, payload.operator_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except AlreadyResolvedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return ApiResponse(data=ValidationIssueRead.model_validate(issue))
