# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from heartcheck.assessment.fields import ALIASES, normalize_header, resolve, resolve_field


class TestNormalizeHeader(unittest.TestCase):
    def test_strips_case_punctuation_and_whitespace(self) -> None:
        self.assertEqual(normalize_header(" Height (cm) "), "heightcm")
        self.assertEqual(normalize_header("Do you smoke?"), "doyousmoke")
        self.assertEqual(normalize_header("E-Mail"), "email")


class TestResolveField(unittest.TestCase):
    def test_exact_match_ignores_case_and_punctuation(self) -> None:
        self.assertEqual(resolve_field({"FULL-NAME": "Asha"}, ["full name"]), "Asha")

    def test_row_key_containing_alias(self) -> None:
        self.assertEqual(resolve_field({"Patient Mobile No.": "98765"}, ["mobile"]), "98765")

    def test_alias_containing_row_key(self) -> None:
        self.assertEqual(resolve_field({"Mobile": "98765"}, ["mobile number"]), "98765")

    def test_aliases_are_tried_in_order(self) -> None:
        row = {"Name": "short", "Full Name": "Asha Rao"}
        self.assertEqual(resolve_field(row, ["full name", "name"]), "Asha Rao")

    def test_exact_match_beats_earlier_substring_match(self) -> None:
        row = {"Patient Name": "first", "Name": "exact"}
        self.assertEqual(resolve_field(row, ["name"]), "exact")

    def test_first_key_wins_within_a_tier(self) -> None:
        row = {"Home Phone": "111", "Work Phone": "222"}
        self.assertEqual(resolve_field(row, ["phone"]), "111")

    def test_no_match_returns_none(self) -> None:
        self.assertIsNone(resolve_field({"Favourite colour": "blue"}, ["name", "email"]))

    def test_short_aliases_match_inside_longer_headers(self) -> None:
        self.assertEqual(resolve_field({"BP": "130/85"}, ["bp"]), "130/85")
        self.assertEqual(resolve({"BP (mmHg)": "150/95"}, "blood_pressure"), "150/95")
        self.assertEqual(resolve({"FH (Y/N)": "yes"}, "family_history"), "yes")
        self.assertEqual(resolve({"CP?": "y"}, "chest_pain"), "y")

    def test_pulse_header_with_unit(self) -> None:
        row = {"BP": "130/85", "Pulse Rate (BPM)": "76"}
        self.assertEqual(resolve(row, "pulse"), "76")
        self.assertEqual(resolve(row, "blood_pressure"), "130/85")
        self.assertIsNone(resolve({"BP": "130/85"}, "pulse"))

    def test_punctuation_only_header_never_matches(self) -> None:
        self.assertIsNone(resolve_field({"#": "1", "??": "2"}, ["name", "age"]))

    def test_blank_value_is_returned_when_column_exists(self) -> None:
        self.assertEqual(resolve_field({"Name": ""}, ["name"]), "")

    def test_resolve_uses_alias_table(self) -> None:
        row = {"Blood Pressure Systolic (upper number) / Diastolic (lower number)": "140/90"}
        self.assertEqual(resolve(row, "blood_pressure"), "140/90")
        self.assertIn("pulse", ALIASES)

    def test_age_column_does_not_leak_into_sleep(self) -> None:
        row = {"Age": "45", "Hours of sleep": "6"}
        self.assertEqual(resolve(row, "sleep"), "6")
        self.assertIsNone(resolve({"Age": "45"}, "sleep"))


if __name__ == "__main__":
    unittest.main()
