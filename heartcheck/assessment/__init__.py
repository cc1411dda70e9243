# -*- coding: utf-8 -*-
"""
Heart-health assessment domain

Tolerant spreadsheet import, Framingham-style risk score and heart age.
"""

from .fields import FIELD_ALIASES, resolve_field
from .importer import ImportResult, calculate_records, process_spreadsheet, read_spreadsheet
from .models import DiscoveredFields, PatientAssessment
from .normalizer import coerce_assessment, normalize_row
from .scoring import apply_calculations, framingham_risk_percent, heart_age, risk_score

__all__ = [
    # Resolver
    "FIELD_ALIASES",
    "resolve_field",
    # Normalizer
    "normalize_row",
    "coerce_assessment",
    # Scoring
    "framingham_risk_percent",
    "risk_score",
    "heart_age",
    "apply_calculations",
    # Import
    "ImportResult",
    "read_spreadsheet",
    "process_spreadsheet",
    "calculate_records",
    # Models
    "PatientAssessment",
    "DiscoveredFields",
]
