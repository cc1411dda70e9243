# -*- coding: utf-8 -*-
"""Scored assessment storage helpers (SQLite)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..errors import AssessmentNotFoundError
from .models import PatientAssessment, StoredAssessment
from .scoring import apply_calculations


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _table() -> str:
    return settings.assessments_table


def _row_to_stored(row: Dict[str, Any]) -> StoredAssessment:
    payload: Dict[str, Any] = {}
    raw = row.get("payload_json")
    if raw:
        try:
            payload = json.loads(raw)
        except ValueError:
            payload = {}
    payload.update(
        bmi=row.get("bmi"),
        risk_score=row.get("risk_score"),
        heart_age=row.get("heart_age"),
    )
    return StoredAssessment(
        id=row["id"],
        assessment=PatientAssessment.model_validate(payload),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def save_assessment(record: PatientAssessment) -> StoredAssessment:
    assessment_id = str(uuid4())
    now = _utc_now()
    payload = record.model_dump(mode="json")
    with db_conn(settings.db_path) as conn:
        conn.execute(
            f"""
            INSERT INTO {_table()} (
                id, name, mobile, email, bmi, risk_score, heart_age, payload_json, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                assessment_id,
                record.name,
                record.mobile,
                record.email,
                record.bmi,
                record.risk_score,
                record.heart_age,
                json.dumps(payload, ensure_ascii=False),
                now,
                now,
            ),
        )
    return StoredAssessment(id=assessment_id, assessment=record, created_at=now, updated_at=now)


def get_assessment(assessment_id: str) -> Optional[StoredAssessment]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute(f"SELECT * FROM {_table()} WHERE id = ?", (assessment_id,)).fetchone()
    if not row:
        return None
    return _row_to_stored(dict(row))


def rescore_assessment(assessment_id: str) -> StoredAssessment:
    """Recompute bmi/risk_score/heart_age from the stored inputs and persist them."""
    stored = get_assessment(assessment_id)
    if stored is None:
        raise AssessmentNotFoundError(f"Assessment not found: {assessment_id}")

    record = apply_calculations(stored.assessment)
    now = _utc_now()
    with db_conn(settings.db_path) as conn:
        conn.execute(
            f"""
            UPDATE {_table()}
            SET bmi = ?, risk_score = ?, heart_age = ?, payload_json = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                record.bmi,
                record.risk_score,
                record.heart_age,
                json.dumps(record.model_dump(mode="json"), ensure_ascii=False),
                now,
                assessment_id,
            ),
        )
    return StoredAssessment(id=assessment_id, assessment=record, created_at=stored.created_at, updated_at=now)
