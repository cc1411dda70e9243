# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from heartcheck.assessment.models import PatientAssessment
from heartcheck.assessment.normalizer import round_half_up
from heartcheck.assessment.scoring import (
    MEN,
    WOMEN,
    RiskProfile,
    match_reference_age,
    apply_calculations,
    coefficients_for,
    framingham_risk_percent,
    heart_age,
    is_smoker,
    lifestyle_modifier,
    risk_score,
)


def _patient(**overrides) -> PatientAssessment:
    values = dict(name="T", age=50, gender="male", height=165.0, weight=65.0, bmi=24.0, systolic=120, diastolic=80)
    values.update(overrides)
    return PatientAssessment(**values)


def _base_risk(record: PatientAssessment) -> float:
    return framingham_risk_percent(RiskProfile.from_assessment(record))


class TestRiskModel(unittest.TestCase):
    def test_coefficient_sets(self) -> None:
        self.assertIs(coefficients_for("male"), MEN)
        self.assertIs(coefficients_for("female"), WOMEN)
        self.assertIs(coefficients_for("other"), WOMEN)
        self.assertIs(coefficients_for(None), MEN)

    def test_is_smoker(self) -> None:
        for value in ("regularly", "Occasionally", "YES", True):
            self.assertTrue(is_smoker(value), value)
        for value in ("no", "", None, "former", False):
            self.assertFalse(is_smoker(value), value)

    def test_risk_is_a_bounded_percentage(self) -> None:
        score = risk_score(_patient())
        self.assertGreater(score, 0)
        self.assertLessEqual(score, 99.9)
        self.assertEqual(score, round(score, 1))

    def test_risk_grows_with_pressure_age_and_bmi(self) -> None:
        base = _base_risk(_patient())
        self.assertGreater(_base_risk(_patient(systolic=160)), base)
        self.assertGreater(_base_risk(_patient(age=65)), base)
        self.assertGreater(_base_risk(_patient(bmi=32.0)), base)

    def test_smoking_and_diabetes_raise_risk(self) -> None:
        base = risk_score(_patient())
        self.assertGreater(risk_score(_patient(smoking="regularly")), base)
        self.assertGreater(risk_score(_patient(diabetes="yes")), base)
        self.assertEqual(risk_score(_patient(smoking="never")), base)

    def test_multipliers(self) -> None:
        base = _base_risk(_patient())
        self.assertEqual(risk_score(_patient(ldl=200)), round_half_up(base * 1.3, 1))
        self.assertEqual(risk_score(_patient(ldl=160)), round_half_up(base, 1))
        self.assertEqual(risk_score(_patient(hdl=35)), round_half_up(base * 1.2, 1))
        self.assertEqual(risk_score(_patient(family_history=True)), round_half_up(base * 1.2, 1))
        self.assertEqual(risk_score(_patient(chest_pain=True)), round_half_up(base * 1.3, 1))

    def test_score_is_capped(self) -> None:
        record = _patient(
            age=90, bmi=45.0, systolic=220, smoking="regularly", diabetes="yes",
            ldl=200, hdl=30, family_history=True, chest_pain=True,
        )
        self.assertEqual(risk_score(record), 99.9)

    def test_smoker_with_high_pressure_outscores_normal_patient(self) -> None:
        asha = _patient(name="Asha", age=45, height=160.0, weight=80.0, bmi=31.3,
                        systolic=145, diastolic=95, smoking="regularly")
        control = _patient(name="Asha", age=45, height=160.0, weight=80.0, bmi=31.3)
        self.assertGreater(risk_score(asha), risk_score(control))


class TestHeartAge(unittest.TestCase):
    def test_ideal_patient_matches_own_age(self) -> None:
        record = _patient(age=40, bmi=22.5, systolic=115, sleep_hours=0)
        self.assertEqual(lifestyle_modifier(record), 0)
        self.assertEqual(heart_age(record), 40)

    def test_reference_age_search_stays_in_range(self) -> None:
        young = RiskProfile(gender="male", age=5, bmi=22.5, systolic=115)
        old = RiskProfile(gender="female", age=120, bmi=22.5, systolic=115)
        self.assertEqual(match_reference_age(young), 20)
        self.assertEqual(match_reference_age(old), 90)

    def test_lower_clamp(self) -> None:
        record = _patient(
            age=20, gender="female", height=160.0, weight=57.6, bmi=22.5, systolic=115,
            diet="Balanced", exercise="Active", sleep_hours=7,
        )
        self.assertEqual(heart_age(record), 18)

    def test_upper_clamp(self) -> None:
        record = _patient(
            age=90, bmi=40.0, systolic=200, smoking="regularly", diabetes="yes",
            diet="High-carb", exercise="Sedentary", sleep_hours=4,
            chest_pain=True, shortness_of_breath=True, family_history=True,
        )
        self.assertEqual(heart_age(record), 100)

    def test_lifestyle_modifier(self) -> None:
        healthy = _patient(sleep_hours=8, diet="Balanced diet", exercise="Daily workout")
        self.assertEqual(lifestyle_modifier(healthy), -5)
        unhealthy = _patient(sleep_hours=5, diet="Irregular", exercise="Sedentary", shortness_of_breath=True)
        self.assertEqual(lifestyle_modifier(unhealthy), 6)

    def test_risk_factors_age_the_heart(self) -> None:
        self.assertGreater(heart_age(_patient(systolic=170, smoking="yes")), heart_age(_patient()))

    def test_lipids_do_not_move_heart_age(self) -> None:
        self.assertEqual(heart_age(_patient(ldl=220, hdl=30)), heart_age(_patient()))


class TestApplyCalculations(unittest.TestCase):
    def test_sets_derived_fields_in_place(self) -> None:
        record = PatientAssessment(name="X", age=30, height=165, weight=60, systolic=120)
        result = apply_calculations(record)
        self.assertIs(result, record)
        self.assertEqual(record.bmi, 22.0)
        self.assertGreater(record.risk_score, 0)
        self.assertLess(record.risk_score, 10)
        self.assertLessEqual(abs(record.heart_age - 30), 5)

    def test_is_idempotent(self) -> None:
        record = apply_calculations(_patient(ldl=190, family_history=True))
        first = (record.bmi, record.risk_score, record.heart_age)
        apply_calculations(record)
        self.assertEqual((record.bmi, record.risk_score, record.heart_age), first)


if __name__ == "__main__":
    unittest.main()
