# -*- coding: utf-8 -*-
"""Batch import: spreadsheet bytes -> normalized (and optionally scored) records."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

import httpx
import pandas as pd

from ..errors import ImportInputError, SpreadsheetFetchError, SpreadsheetParseError
from .models import DiscoveredFields, ImportAction, PatientAssessment, ProcessReportRequest, ProcessReportResponse
from .normalizer import coerce_assessment, normalize_row
from .scoring import apply_calculations

logger = logging.getLogger(__name__)

_XLSX_SIGNATURE = b"PK\x03\x04"
_OLE_SIGNATURE = b"\xd0\xcf\x11\xe0"

EMPTY_SHEET_DIAGNOSTIC = "The spreadsheet appears to be empty or in an unrecognized format."
NO_PATIENTS_DIAGNOSTIC = (
    "Found data rows, but could not recognize any patient names. "
    "Ensure you have a 'Full Name' or 'Name' column."
)


@dataclass
class ImportResult:
    records: List[PatientAssessment]
    discovery: DiscoveredFields = field(default_factory=DiscoveredFields)
    diagnostic: Optional[str] = None
    row_count: int = 0


def read_spreadsheet(data: bytes) -> List[Dict[str, Any]]:
    """Rows of the first sheet as dicts; empty cells become ``""``.

    ``.xlsx`` workbooks are detected by their zip signature, anything else is
    read as CSV.
    """
    if not data or not data.strip():
        return []
    if data.startswith(_OLE_SIGNATURE):
        raise SpreadsheetParseError("Legacy .xls workbooks are not supported; save the sheet as .xlsx or .csv")
    try:
        if data.startswith(_XLSX_SIGNATURE):
            frame = pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=object, engine="openpyxl")
        else:
            frame = pd.read_csv(
                io.BytesIO(data),
                dtype=object,
                keep_default_na=False,
                encoding="utf-8-sig",
            )
    except pd.errors.EmptyDataError:
        return []
    except Exception as exc:
        raise SpreadsheetParseError(f"Could not read spreadsheet: {exc}") from exc

    frame.columns = [str(col) for col in frame.columns]
    frame = frame.astype(object).where(frame.notna(), "")
    return frame.to_dict(orient="records")


def normalize_rows(rows: Iterable[Mapping[str, Any]], discovery: DiscoveredFields) -> List[PatientAssessment]:
    records: List[PatientAssessment] = []
    for index, row in enumerate(rows):
        record = normalize_row(row, index, discovery)
        if record is not None:
            records.append(record)
    return records


def process_rows(rows: List[Dict[str, Any]], mode: ImportAction = ImportAction.parse) -> ImportResult:
    logger.info("Found %s raw rows in the sheet.", len(rows))
    if rows:
        logger.info("First row keys: %s", list(rows[0].keys()))

    discovery = DiscoveredFields()
    records = normalize_rows(rows, discovery)
    if ImportAction.coerce(mode) is ImportAction.calculate:
        for record in records:
            apply_calculations(record)

    logger.info("Processed %s patients from %s rows", len(records), len(rows))

    diagnostic: Optional[str] = None
    if not records:
        diagnostic = NO_PATIENTS_DIAGNOSTIC if rows else EMPTY_SHEET_DIAGNOSTIC
    return ImportResult(records=records, discovery=discovery, diagnostic=diagnostic, row_count=len(rows))


def process_spreadsheet(data: bytes, mode: ImportAction = ImportAction.parse) -> ImportResult:
    return process_rows(read_spreadsheet(data), mode)


def calculate_records(items: Iterable[Mapping[str, Any]]) -> List[PatientAssessment]:
    """Recompute bmi, risk_score and heart_age for already-normalized records."""
    return [apply_calculations(coerce_assessment(item)) for item in items]


def fetch_spreadsheet(
    url: str,
    *,
    timeout: float,
    max_bytes: Optional[int] = None,
    client: Optional[httpx.Client] = None,
) -> bytes:
    logger.info("Fetching spreadsheet from: %s", url)
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        resp = http.get(url)
    except httpx.HTTPError as exc:
        raise SpreadsheetFetchError(f"Failed to fetch file: {exc}") from exc
    finally:
        if owns_client:
            http.close()
    if not resp.is_success:
        raise SpreadsheetFetchError(f"Failed to fetch file: {resp.reason_phrase or resp.status_code}")
    if max_bytes is not None and len(resp.content) > max_bytes:
        raise SpreadsheetFetchError(f"File too large: {len(resp.content)} bytes > {max_bytes}")
    return resp.content


def handle_process_request(
    request: ProcessReportRequest,
    *,
    timeout: float,
    max_bytes: Optional[int] = None,
    client: Optional[httpx.Client] = None,
) -> ProcessReportResponse:
    """Serve both request shapes of the process-report endpoint.

    ``{"action": "calculate", "data": [...]}`` recomputes the derived fields of
    records the caller already holds; anything else needs a ``url`` to fetch.
    """
    if request.action is ImportAction.calculate and request.data is not None:
        return ProcessReportResponse(data=calculate_records(request.data))

    if not request.url:
        raise ImportInputError("URL is required")

    data = fetch_spreadsheet(request.url, timeout=timeout, max_bytes=max_bytes, client=client)
    result = process_spreadsheet(data, request.action)
    return ProcessReportResponse(data=result.records, discovery=result.discovery, diagnostic=result.diagnostic)
