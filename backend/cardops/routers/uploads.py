"""Spreadsheet upload and validation routes."""

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from cardops.config import get_settings
from cardops.db.dependencies import get_db
from cardops.errors import NotFoundError, TransactionError
from cardops.reconciliation.types import SourceType
from cardops.schemas.batch import BatchResult, ValidationBatchResult
from cardops.schemas.common import ApiResponse
from cardops.services.reconciliation import process_batch
from cardops.services.spreadsheets import load_rows
from cardops.services.validation import validate_batch

router = APIRouter(prefix="/uploads")


def _read_upload(file: UploadFile) -> list[dict]:
    contents = file.file.read()
    try:
        return load_rows(file.filename, contents, max_bytes=get_settings().max_upload_bytes)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/spreadsheet", response_model=ApiResponse[BatchResult])
def upload_spreadsheet(
    file: UploadFile = File(...),
    source_type: SourceType = Form(...),
    operator_id: int = Form(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[BatchResult]:
    """Reconcile an uploaded spreadsheet into the proposal store."""

    rows = _read_upload(file)
    try:
        result = process_batch(db, rows, source_type, operator_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TransactionError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return ApiResponse(data=result)


@router.post("/validate", response_model=ApiResponse[ValidationBatchResult])
def validate_spreadsheet(
    file: UploadFile = File(...),
    operator_id: int = Form(..., ge=1),
    db: Session = Depends(get_db),
) -> ApiResponse[ValidationBatchResult]:
    """Validate an uploaded spreadsheet against stored proposals."""

    rows = _read_upload(file)
    try:
        result = validate_batch(db, rows, operator_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TransactionError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return ApiResponse(data=result)
