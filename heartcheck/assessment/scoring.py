# -*- coding: utf-8 -*-
"""
Cardiovascular risk and heart-age estimation

Framingham-style logistic model (age, BMI, systolic pressure, smoking,
diabetes) with gender-specific coefficient sets, plus a heart-age lookup that
finds the age at which an ideal-risk-factor patient carries the same modeled
risk.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Optional

from .models import Gender, PatientAssessment
from .normalizer import compute_bmi, round_half_up

SMOKER_VALUES = frozenset({"regularly", "occasionally", "yes"})

DEFAULT_AGE = 30.0
DEFAULT_SYSTOLIC = 120.0
DEFAULT_BMI = 24.0

# Composite score multipliers
LDL_THRESHOLD = 160
LDL_MULTIPLIER = 1.3
HDL_THRESHOLD = 40
HDL_MULTIPLIER = 1.2
FAMILY_HISTORY_MULTIPLIER = 1.2
CHEST_PAIN_MULTIPLIER = 1.3
MAX_RISK_SCORE = 99.9

# Heart-age search
REFERENCE_BMI = 22.5
REFERENCE_SYSTOLIC = 115.0
SEARCH_MIN_AGE = 20
SEARCH_MAX_AGE = 90
MIN_HEART_AGE = 18
MAX_HEART_AGE = 100


@dataclass(frozen=True)
class FraminghamCoefficients:
    ln_age: float
    ln_bmi: float
    ln_sbp: float
    smoking: float
    diabetes: float
    mean_beta_x: float
    baseline_survival: float


MEN = FraminghamCoefficients(
    ln_age=3.06117,
    ln_bmi=0.905964,
    ln_sbp=1.93303,
    smoking=0.65451,
    diabetes=0.57367,
    mean_beta_x=23.9802,
    baseline_survival=0.88936,
)

WOMEN = FraminghamCoefficients(
    ln_age=2.32888,
    ln_bmi=0.857314,
    ln_sbp=2.76157,
    smoking=0.52873,
    diabetes=0.69154,
    mean_beta_x=26.1931,
    baseline_survival=0.95012,
)


def coefficients_for(gender: Optional[str]) -> FraminghamCoefficients:
    """Women's set for "female" and "other", men's set otherwise."""
    value = (gender or Gender.male.value).strip().lower()
    if value in {Gender.female.value, Gender.other.value}:
        return WOMEN
    return MEN


def is_smoker(smoking: Any) -> bool:
    if isinstance(smoking, bool):
        return smoking
    return str(smoking or "").strip().lower() in SMOKER_VALUES


def has_diabetes(diabetes: Any) -> bool:
    if isinstance(diabetes, bool):
        return diabetes
    return str(diabetes or "").strip().lower() == "yes"


def _positive(value: Optional[float], default: float) -> float:
    if value is None or not value > 0:
        return default
    return float(value)


@dataclass(frozen=True)
class RiskProfile:
    """Inputs of the logistic model."""
    gender: str
    age: float
    bmi: float
    systolic: float
    smoker: bool = False
    diabetic: bool = False

    @classmethod
    def from_assessment(cls, record: PatientAssessment) -> "RiskProfile":
        return cls(
            gender=str(record.gender),
            age=_positive(record.age, DEFAULT_AGE),
            bmi=_positive(record.bmi, DEFAULT_BMI),
            systolic=_positive(record.systolic, DEFAULT_SYSTOLIC),
            smoker=is_smoker(record.smoking),
            diabetic=has_diabetes(record.diabetes),
        )

    def ideal(self) -> "RiskProfile":
        """Same gender and age, ideal modifiable risk factors."""
        return replace(self, bmi=REFERENCE_BMI, systolic=REFERENCE_SYSTOLIC, smoker=False, diabetic=False)


def framingham_risk_percent(profile: RiskProfile) -> float:
    """
    Base modeled risk in percent (not capped)

    risk = 1 - S0 ^ exp(betaX - meanBetaX)
    """
    c = coefficients_for(profile.gender)
    beta_x = (
        c.ln_age * math.log(_positive(profile.age, DEFAULT_AGE))
        + c.ln_bmi * math.log(_positive(profile.bmi, DEFAULT_BMI))
        + c.ln_sbp * math.log(_positive(profile.systolic, DEFAULT_SYSTOLIC))
        + (c.smoking if profile.smoker else 0.0)
        + (c.diabetes if profile.diabetic else 0.0)
    )
    # Exponent capped so absurd inputs saturate at 100% instead of overflowing.
    risk = 1 - c.baseline_survival ** math.exp(min(beta_x - c.mean_beta_x, 700.0))
    return risk * 100


def risk_score(record: PatientAssessment) -> float:
    """
    Composite risk score (percent, one decimal, at most 99.9)

    Base model times lipid, family-history and chest-pain multipliers.
    """
    risk = framingham_risk_percent(RiskProfile.from_assessment(record))
    if record.ldl and record.ldl > LDL_THRESHOLD:
        risk *= LDL_MULTIPLIER
    if record.hdl and record.hdl < HDL_THRESHOLD:
        risk *= HDL_MULTIPLIER
    if record.family_history:
        risk *= FAMILY_HISTORY_MULTIPLIER
    if record.chest_pain:
        risk *= CHEST_PAIN_MULTIPLIER
    return round_half_up(min(MAX_RISK_SCORE, risk), 1)


def lifestyle_modifier(record: PatientAssessment) -> int:
    modifier = 0
    if record.sleep_hours:
        if record.sleep_hours < 6 or record.sleep_hours > 9:
            modifier += 1
        else:
            modifier -= 1
    diet = (record.diet or "").lower()
    if "high-carb" in diet or "irregular" in diet:
        modifier += 2
    elif "balanced" in diet or "restrict" in diet:
        modifier -= 2
    exercise = (record.exercise or "").lower()
    if "sedentary" in exercise:
        modifier += 2
    elif "active" in exercise or "workout" in exercise:
        modifier -= 2
    if record.chest_pain:
        modifier += 2
    if record.shortness_of_breath:
        modifier += 1
    if record.family_history:
        modifier += 2
    return modifier


def match_reference_age(profile: RiskProfile) -> int:
    """Age (20..90) at which the ideal reference patient has the closest risk."""
    target = framingham_risk_percent(profile)
    reference = profile.ideal()
    best_age = SEARCH_MIN_AGE
    best_diff = math.inf
    for age in range(SEARCH_MIN_AGE, SEARCH_MAX_AGE + 1):
        diff = abs(framingham_risk_percent(replace(reference, age=float(age))) - target)
        if diff < best_diff:
            best_diff = diff
            best_age = age
    return best_age


def heart_age(record: PatientAssessment) -> int:
    matched = match_reference_age(RiskProfile.from_assessment(record))
    return max(MIN_HEART_AGE, min(MAX_HEART_AGE, matched + lifestyle_modifier(record)))


def apply_calculations(record: PatientAssessment) -> PatientAssessment:
    """Recompute bmi and attach ``risk_score``/``heart_age`` in place."""
    record.bmi = compute_bmi(record.height, record.weight)
    record.risk_score = risk_score(record)
    record.heart_age = heart_age(record)
    return record
