"""Operator account routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from cardops.db.dependencies import get_db
from cardops.errors import NotFoundError
from cardops.schemas.common import ApiResponse
from cardops.schemas.operator import HistoryEntryRead, OperatorCreate, OperatorRead
from cardops.services.history import list_history
from cardops.services.operators import create_operator, get_operator

router = APIRouter(prefix="/operators")


@router.post("", response_model=ApiResponse[OperatorRead], status_code=201)
def post_operator(payload: OperatorCreate, db: Session = Depends(get_db)) -> ApiResponse[OperatorRead]:
    return ApiResponse(data=OperatorRead.model_validate(create_operator(db, payload.name)))


@router.get("/{operator_id}", response_model=ApiResponse[OperatorRead])
def get_operator_by_id(
    operator_id: int = Path(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[OperatorRead]:
    """Return an operator with cumulative counters and latest score."""

    try:
        operator = get_operator(db, operator_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=OperatorRead.model_validate(operator))


@router.get("/{operator_id}/history", response_model=ApiResponse[list[HistoryEntryRead]])
def get_operator_history(
    operator_id: int = Path(..., ge=1),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
) -> ApiResponse[list[HistoryEntryRead]]:
    try:
        get_operator(db, operator_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(
        data=[HistoryEntryRead.model_validate(entry) for entry in list_history(db, operator_id, limit=limit)]
    )
