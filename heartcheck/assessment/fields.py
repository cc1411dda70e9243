# -*- coding: utf-8 -*-
"""Tolerant spreadsheet header matching.

Spreadsheets arrive from Google Forms exports, clinic templates and hand-made
sheets, so column names vary ("Full Name", "Patient name", "NAME"). Each
canonical field carries an ordered alias list, most specific first, and
``resolve_field`` picks the first row key that matches.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

_NON_ALNUM = re.compile(r"[^a-z0-9]")

FIELD_ALIASES: List[Tuple[str, List[str]]] = [
    ("name", ["full name", "patient name", "fullname", "name", "patient", "first name",
              "firstname", "candidate name", "employee name"]),
    ("mobile", ["mobile number", "mobile", "phone", "contact"]),
    ("email", ["email", "e-mail", "mail"]),
    ("age", ["age", "years", "yrs"]),
    ("gender", ["gender", "sex", "m/f"]),
    ("height", ["height (cm)", "height", "heightcm"]),
    ("weight", ["weight (kg)", "weight", "weightkg"]),
    ("blood_pressure", ["blood pressure systolic (upper number) / diastolic (lower number)",
                        "blood pressure", "bp"]),
    ("systolic", ["systolic", "sys", "bp high", "sbp"]),
    ("diastolic", ["diastolic", "dia", "bp low", "dbp"]),
    ("pulse", ["pulse rate", "pulse", "heart rate"]),
    ("fasting_sugar", ["fasting sugar", "fbs", "sugar level"]),
    ("post_meal_sugar", ["post meal sugar", "ppbs"]),
    ("ldl", ["ldl", "bad cholesterol", "ldl cholesterol"]),
    ("hdl", ["hdl", "good cholesterol", "hdl cholesterol"]),
    ("sleep", ["sleep hours", "sleep"]),
    ("diet", ["how would you define your diet?", "diet"]),
    ("exercise", ["exercise", "activity", "physical activity"]),
    ("smoking", ["do you smoke?", "smoking", "smoke"]),
    ("diabetes", ["do you have diabetes?", "diabetes", "diabetic"]),
    ("knows_lipids", ["do you know your lipid levels?", "lipid levels", "knows lipids"]),
    ("tobacco_use", ["tobacco use", "tobacco", "chewing tobacco", "gutka"]),
    ("high_cholesterol", ["high cholesterol", "cholesterol", "high lipids"]),
    ("initial_symptoms", ["initial symptoms", "symptoms"]),
    ("additional_symptoms", ["additional symptoms"]),
    ("user_notes", ["health notes (optional)", "health notes", "notes"]),
    ("water_intake", ["water intake", "water", "daily water intake", "water consumption"]),
    ("profession", ["profession", "occupation", "job", "work"]),
    ("chest_pain", ["chest pain", "angina", "cp"]),
    ("shortness_of_breath", ["sob", "shortness of breath"]),
    ("dizziness", ["dizziness", "fainting"]),
    ("fatigue", ["fatigue", "tiredness"]),
    ("swelling", ["swelling", "edema"]),
    ("palpitations", ["palpitations", "heart racing"]),
    ("family_history", ["family history", "fh"]),
]

ALIASES: Dict[str, List[str]] = dict(FIELD_ALIASES)


def normalize_header(value: Any) -> str:
    return _NON_ALNUM.sub("", str(value).lower())


def _match_key(keys: Sequence[Tuple[str, str]], wanted: str) -> Optional[str]:
    for key, norm in keys:
        if norm == wanted:
            return key
    for key, norm in keys:
        if wanted in norm:
            return key
    for key, norm in keys:
        if norm in wanted:
            return key
    return None


def resolve_field(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Return the value of the first row column matching one of ``aliases``.

    Aliases are tried in order. For each alias every row key is checked for an
    exact normalized match, then for containing the alias, then for being
    contained in it; the first hit wins. Returns ``None`` when no alias
    matches any column.
    """
    keys = [(key, normalize_header(key)) for key in row]
    keys = [(key, norm) for key, norm in keys if norm]
    for alias in aliases:
        wanted = normalize_header(alias)
        if not wanted:
            continue
        key = _match_key(keys, wanted)
        if key is not None:
            return row[key]
    return None


def resolve(row: Mapping[str, Any], field: str) -> Any:
    """Resolve a canonical field name through ``ALIASES``."""
    return resolve_field(row, ALIASES[field])
