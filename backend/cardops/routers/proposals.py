"""Proposal lookup, operator edit and audit routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from cardops.db.dependencies import get_db
from cardops.errors import NotFoundError
from cardops.schemas.common import ApiResponse
from cardops.schemas.proposal import ProposalOperatorUpdate, ProposalRead
from cardops.schemas.validation_issue import ValidationIssueRead
from cardops.services.proposals import (
    audit_proposal,
    get_proposal,
    list_issues_for_proposal,
    update_operator_fields,
)

router = APIRouter(prefix="/proposals/{unique_id}")


class AuditRequest(BaseModel):
    operator_id: int = Field(ge=1)


@router.get("", response_model=ApiResponse[ProposalRead])
def get_proposal_by_unique_id(
    unique_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ProposalRead]:
    try:
        proposal = get_proposal(db, unique_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=ProposalRead.model_validate(proposal))


@router.put("", response_model=ApiResponse[ProposalRead])
def put_proposal_operator_fields(
    payload: ProposalOperatorUpdate,
    unique_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ProposalRead]:
    """Edit situation, extractor and utilization of a stored proposal."""

    try:
        proposal = update_operator_fields(
            db,
            unique_id,
            payload.operator_id,
            payload.situation,
            payload.extractor,
            payload.utilization,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=ProposalRead.model_validate(proposal))


@router.get("/validations", response_model=ApiResponse[list[ValidationIssueRead]])
def get_proposal_issues(
    unique_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ValidationIssueRead]]:
    """List every issue recorded against a unique id, newest first."""

    return ApiResponse(
        data=[ValidationIssueRead.model_validate(issue) for issue in list_issues_for_proposal(db, unique_id)]
    )


@router.post("/audit", response_model=ApiResponse[list[ValidationIssueRead]])
def post_proposal_audit(
    payload: AuditRequest,
    unique_id: str = Path(..., min_length=1),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ValidationIssueRead]]:
    """Check a stored proposal for missing required data."""

    try:
        issues = audit_proposal(db, unique_id, payload.operator_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=[ValidationIssueRead.model_validate(issue) for issue in issues])
