"""Spreadsheet upload parsing into raw row mappings."""

from __future__ import annotations

import io
import logging
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xls", ".csv")


def load_rows(filename: str | None, contents: bytes, *, max_bytes: int | None = None) -> list[dict[str, Any]]:
    """Read the first sheet of an XLSX/XLS/CSV payload into ordered row dicts.

    Every cell is read as text so identity columns keep leading zeros; blank cells
    become ``None``.
    """

    name = (filename or "").lower()
    if not contents:
        raise ValueError("File is empty. Please upload a file with data.")
    if max_bytes is not None and len(contents) > max_bytes:
        raise ValueError(
            f"File too large ({len(contents) / 1024 / 1024:.1f} MB). "
            f"Maximum allowed: {max_bytes / 1024 / 1024:.0f} MB"
        )
    if name and not name.endswith(SUPPORTED_EXTENSIONS):
        raise ValueError("Only Excel (.xlsx, .xls) and CSV files are allowed")

    frame = _read_frame(name, contents)
    if frame.empty:
        raise ValueError("Spreadsheet is empty")
    frame.columns = [str(column).strip() for column in frame.columns]
    frame = frame.astype(object).where(pd.notna(frame), None)
    rows = [{key: _clean_cell(value) for key, value in record.items()} for record in frame.to_dict("records")]
    logger.info("spreadsheets.loaded filename=%s rows=%d columns=%d", filename, len(rows), len(frame.columns))
    return rows


def _read_frame(name: str, contents: bytes) -> pd.DataFrame:
    buffer = io.BytesIO(contents)
    try:
        if name.endswith(".xlsx"):
            return pd.read_excel(buffer, engine="openpyxl", dtype=str)
        if name.endswith(".xls"):
            return pd.read_excel(buffer, engine="xlrd", dtype=str)
        try:
            return pd.read_csv(buffer, dtype=str, encoding="utf-8")
        except UnicodeDecodeError:
            buffer.seek(0)
            return pd.read_csv(buffer, dtype=str, encoding="latin-1")
    except ValueError:
        raise
    except Exception as exc:
        logger.error("spreadsheets.read_failed filename=%s error=%s: %s", name, type(exc).__name__, exc)
        raise ValueError(f"Could not read spreadsheet: {exc}") from exc


def _clean_cell(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value
