# -*- coding: utf-8 -*-
"""Assessments: API endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, File, Form, UploadFile

from ..config import settings
from ..errors import AssessmentNotFoundError, ImportInputError
from .importer import calculate_records, handle_process_request, process_spreadsheet
from .models import (
    ImportAction,
    ProcessReportRequest,
    ProcessReportResponse,
    ScoreResponse,
    StoredAssessment,
)
from .storage import get_assessment, rescore_assessment, save_assessment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assessments", tags=["Assessments"])


@router.post(
    "/process-report",
    response_model=ProcessReportResponse,
    response_model_exclude_unset=True,
    summary="Import a patient spreadsheet by URL, or recalculate records",
)
def process_report(request: ProcessReportRequest):
    return handle_process_request(
        request,
        timeout=settings.fetch_timeout,
        max_bytes=settings.max_upload_bytes,
    )


@router.post(
    "/upload",
    response_model=ProcessReportResponse,
    response_model_exclude_unset=True,
    summary="Import an uploaded patient spreadsheet",
)
async def upload_report(
    file: UploadFile = File(...),
    mode: str = Form(ImportAction.parse.value),
):
    data = await file.read()
    if len(data) > settings.max_upload_bytes:
        raise ImportInputError(f"File too large: {len(data)} bytes > {settings.max_upload_bytes}")
    result = process_spreadsheet(data, ImportAction.coerce(mode))
    return ProcessReportResponse(data=result.records, discovery=result.discovery, diagnostic=result.diagnostic)


@router.post("", response_model=StoredAssessment, summary="Score and store one assessment")
def create_assessment(payload: Dict[str, Any] = Body(...)):
    record = calculate_records([payload])[0]
    return save_assessment(record)


@router.get("/{assessment_id}", response_model=StoredAssessment, summary="Load a stored assessment")
def read_assessment(assessment_id: str):
    stored = get_assessment(assessment_id)
    if stored is None:
        raise AssessmentNotFoundError(f"Assessment not found: {assessment_id}")
    return stored


@router.post("/{assessment_id}/score", response_model=ScoreResponse, summary="Recompute heart age and risk score")
def score_assessment(assessment_id: str):
    stored = rescore_assessment(assessment_id)
    logger.info(
        "Calculated heart age: %s risk score: %s for %s",
        stored.assessment.heart_age, stored.assessment.risk_score, assessment_id,
    )
    return ScoreResponse(
        id=stored.id,
        heart_age=stored.assessment.heart_age,
        risk_score=stored.assessment.risk_score,
    )
