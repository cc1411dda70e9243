# -*- coding: utf-8 -*-
"""Raw spreadsheet rows / API payloads -> canonical ``PatientAssessment``.

Every field ends up populated: unparsable or missing values fall back to the
documented defaults instead of failing the row.
"""

from __future__ import annotations

import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .fields import resolve
from .models import DiscoveredFields, Gender, PatientAssessment

logger = logging.getLogger(__name__)

DEFAULT_AGE = 30
DEFAULT_HEIGHT_CM = 165.0
DEFAULT_WEIGHT_KG = 65.0
# Readings outside these ranges are treated as unparsable.
HEIGHT_RANGE_CM = (30.0, 300.0)
WEIGHT_RANGE_KG = (1.0, 700.0)
DEFAULT_SYSTOLIC = 120
DEFAULT_DIASTOLIC = 80
DEFAULT_PULSE = 72
DEFAULT_SLEEP_HOURS = 7.0
DEFAULT_DIET = "Balanced"
DEFAULT_EXERCISE = "Active"

YES_VALUES = frozenset({"yes", "y", "1", "true", "present"})

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_FIRST_INTEGER = re.compile(r"\d+")

# (field, free-text keywords found in the symptom columns)
SYMPTOM_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("chest_pain", ("chest pain",)),
    ("shortness_of_breath", ("shortness of breath",)),
    ("dizziness", ("dizziness", "fainting")),
    ("fatigue", ("fatigue", "tiredness")),
    ("swelling", ("swelling",)),
    ("palpitations", ("palpitations", "heart racing")),
    ("family_history", ("family history",)),
]

_DERIVED_FIELDS = ("risk_score", "heart_age")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def parse_number(value: Any) -> Optional[float]:
    """Parse the leading number of ``value`` ("145 mmHg" -> 145.0)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value).strip())
        if not match:
            return None
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def positive_or(value: Any, default: float) -> float:
    number = parse_number(value)
    if number is None or number <= 0:
        return default
    return number


def positive_int_or(value: Any, default: int) -> int:
    return max(1, round(positive_or(value, default)))


def in_range_or(value: Any, default: float, bounds: Tuple[float, float]) -> float:
    number = parse_number(value)
    if number is None or not bounds[0] <= number <= bounds[1]:
        return default
    return number


def parse_height(value: Any) -> float:
    return in_range_or(value, DEFAULT_HEIGHT_CM, HEIGHT_RANGE_CM)


def parse_weight(value: Any) -> float:
    return in_range_or(value, DEFAULT_WEIGHT_KG, WEIGHT_RANGE_KG)


def optional_positive(value: Any) -> Optional[float]:
    number = parse_number(value)
    if number is None or number <= 0:
        return None
    return number


def is_yes(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip().lower() in YES_VALUES


def text_or(value: Any, default: str = "") -> str:
    if is_blank(value):
        return default
    return str(value).strip()


def normalize_gender(value: Any) -> str:
    text = text_or(value).lower()
    if text.startswith(("f", "w")):
        return Gender.female.value
    if text in {"o", "other", "non-binary", "nonbinary"}:
        return Gender.other.value
    return Gender.male.value


def normalize_status(value: Any) -> str:
    """Smoking/diabetes answers: booleans become yes/no, text is lowercased."""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return text_or(value, "no").lower()


def parse_sleep_hours(value: Any) -> float:
    if is_blank(value):
        return DEFAULT_SLEEP_HOURS
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(int(value))
    match = _FIRST_INTEGER.search(str(value))
    if not match:
        return DEFAULT_SLEEP_HOURS
    return float(match.group(0))


def parse_blood_pressure(combined: Any, systolic: Any, diastolic: Any) -> Tuple[int, int]:
    if not is_blank(combined) and "/" in str(combined):
        upper, lower = str(combined).split("/", 1)
        return (
            positive_int_or(upper, DEFAULT_SYSTOLIC),
            positive_int_or(lower, DEFAULT_DIASTOLIC),
        )
    return (
        positive_int_or(systolic, DEFAULT_SYSTOLIC),
        positive_int_or(diastolic, DEFAULT_DIASTOLIC),
    )


def round_half_up(value: float, digits: int = 1) -> float:
    if not math.isfinite(value) or abs(value) >= 1e15:
        return value
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_bmi(height_cm: Any, weight_kg: Any) -> float:
    height_cm = parse_height(height_cm)
    weight_kg = parse_weight(weight_kg)
    # kg / m^2, computed in cm so 80 kg at 160 cm is exactly 31.25 -> 31.3
    return round_half_up(weight_kg * 10000 / (height_cm ** 2), 1)


def mark_discovered(discovery: DiscoveredFields, values: Mapping[str, Any]) -> None:
    present = {key: not is_blank(value) for key, value in values.items()}
    discovery.name = discovery.name or present["name"]
    discovery.mobile = discovery.mobile or present["mobile"]
    discovery.email = discovery.email or present["email"]
    discovery.age = discovery.age or present["age"]
    discovery.bp = discovery.bp or present["blood_pressure"] or present["systolic"]
    discovery.pulse = discovery.pulse or present["pulse"]
    discovery.sugar = discovery.sugar or present["fasting_sugar"] or present["post_meal_sugar"]
    discovery.bmi_input = discovery.bmi_input or present["height"] or present["weight"]


def normalize_row(
    row: Mapping[str, Any],
    index: int,
    discovery: Optional[DiscoveredFields] = None,
) -> Optional[PatientAssessment]:
    """Build a ``PatientAssessment`` from one spreadsheet row.

    ``index`` is the 0-based row position, used for the "Patient N" fallback
    name. Returns ``None`` for a row whose cells are all blank. When
    ``discovery`` is given, the columns found in this row are recorded on it.
    """
    raw: Dict[str, Any] = {
        field: resolve(row, field)
        for field in (
            "name", "mobile", "email", "age", "gender", "height", "weight",
            "blood_pressure", "systolic", "diastolic", "pulse",
            "fasting_sugar", "post_meal_sugar", "ldl", "hdl",
            "sleep", "diet", "exercise", "smoking", "diabetes",
            "knows_lipids", "tobacco_use", "high_cholesterol",
            "initial_symptoms", "additional_symptoms", "user_notes",
            "water_intake", "profession",
        )
    }
    if discovery is not None:
        mark_discovered(discovery, raw)

    if all(is_blank(value) for value in row.values()):
        logger.debug("Row %s skipped: no data", index)
        return None

    systolic, diastolic = parse_blood_pressure(raw["blood_pressure"], raw["systolic"], raw["diastolic"])
    height = parse_height(raw["height"])
    weight = parse_weight(raw["weight"])

    symptom_text = f"{text_or(raw['initial_symptoms']).lower()} {text_or(raw['additional_symptoms']).lower()}"
    symptoms = {
        field: is_yes(resolve(row, field)) or any(keyword in symptom_text for keyword in keywords)
        for field, keywords in SYMPTOM_KEYWORDS
    }

    record = PatientAssessment(
        name=text_or(raw["name"]) or f"Patient {index + 1}",
        mobile=text_or(raw["mobile"]),
        email=text_or(raw["email"]).lower(),
        age=positive_int_or(raw["age"], DEFAULT_AGE),
        gender=normalize_gender(raw["gender"]),
        height=height,
        weight=weight,
        bmi=compute_bmi(height, weight),
        systolic=systolic,
        diastolic=diastolic,
        pulse=positive_int_or(raw["pulse"], DEFAULT_PULSE),
        ldl=optional_positive(raw["ldl"]),
        hdl=optional_positive(raw["hdl"]),
        fasting_sugar=optional_positive(raw["fasting_sugar"]),
        post_meal_sugar=optional_positive(raw["post_meal_sugar"]),
        diet=text_or(raw["diet"], DEFAULT_DIET),
        exercise=text_or(raw["exercise"], DEFAULT_EXERCISE),
        sleep_hours=parse_sleep_hours(raw["sleep"]),
        water_intake=optional_positive(raw["water_intake"]),
        smoking=normalize_status(raw["smoking"]),
        diabetes=normalize_status(raw["diabetes"]),
        tobacco_use=is_yes(raw["tobacco_use"]),
        knows_lipids=is_yes(raw["knows_lipids"]),
        high_cholesterol=is_yes(raw["high_cholesterol"]),
        user_notes=text_or(raw["user_notes"]),
        profession=text_or(raw["profession"]),
        **symptoms,
    )
    if index < 3:
        logger.info(
            "Row %s - Name: %s, Age: %s, BP: %s/%s, Mobile: %s",
            index, record.name, record.age, record.systolic, record.diastolic, record.mobile,
        )
    return record


def coerce_assessment(item: Mapping[str, Any]) -> PatientAssessment:
    """Re-coerce an already canonical record (calculate mode).

    Same numeric defaults as ``normalize_row``, but diet and exercise stay
    blank when not given. Keys the model does not know are kept,
    incoming ``risk_score``/``heart_age`` are dropped and ``bmi`` is
    recomputed.
    """
    payload = {key: value for key, value in item.items() if key not in _DERIVED_FIELDS}
    height = parse_height(payload.get("height"))
    weight = parse_weight(payload.get("weight"))
    payload.update(
        name=text_or(payload.get("name")),
        mobile=text_or(payload.get("mobile")),
        email=text_or(payload.get("email")).lower(),
        age=positive_int_or(payload.get("age"), DEFAULT_AGE),
        gender=normalize_gender(payload.get("gender")),
        height=height,
        weight=weight,
        bmi=compute_bmi(height, weight),
        systolic=positive_int_or(payload.get("systolic"), DEFAULT_SYSTOLIC),
        diastolic=positive_int_or(payload.get("diastolic"), DEFAULT_DIASTOLIC),
        pulse=positive_int_or(payload.get("pulse"), DEFAULT_PULSE),
        ldl=optional_positive(payload.get("ldl")),
        hdl=optional_positive(payload.get("hdl")),
        fasting_sugar=optional_positive(payload.get("fasting_sugar")),
        post_meal_sugar=optional_positive(payload.get("post_meal_sugar")),
        diet=text_or(payload.get("diet")),
        exercise=text_or(payload.get("exercise")),
        sleep_hours=_coerce_sleep(payload.get("sleep_hours")),
        water_intake=optional_positive(payload.get("water_intake")),
        smoking=normalize_status(payload.get("smoking")),
        diabetes=normalize_status(payload.get("diabetes")),
        user_notes=text_or(payload.get("user_notes")),
        profession=text_or(payload.get("profession")),
    )
    for field in ("tobacco_use", "knows_lipids", "high_cholesterol") + tuple(f for f, _ in SYMPTOM_KEYWORDS):
        payload[field] = is_yes(payload.get(field))
    return PatientAssessment.model_validate(payload)


def _coerce_sleep(value: Any) -> float:
    number = parse_number(value)
    if number is None or number < 0:
        return DEFAULT_SLEEP_HOURS
    return number
