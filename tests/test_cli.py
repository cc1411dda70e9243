# -*- coding: utf-8 -*-

from __future__ import annotations

import io
import json
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from heartcheck.cli import main


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="heartcheck-cli-"))

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def _run(self, *argv: str):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_import_json(self) -> None:
        sheet = self._tmp / "patients.csv"
        sheet.write_text("Name,Age,Email\nAsha,45,ASHA@example.com\n,,\n", encoding="utf-8")
        code, output = self._run("import", str(sheet), "--calculate", "--json")
        self.assertEqual(code, 0)
        payload = json.loads(output)
        self.assertEqual(len(payload["data"]), 1)
        self.assertEqual(payload["data"][0]["email"], "asha@example.com")
        self.assertIsNotNone(payload["data"][0]["heart_age"])
        self.assertTrue(payload["discovery"]["email"])
        self.assertIsNone(payload["diagnostic"])

    def test_import_summary(self) -> None:
        sheet = self._tmp / "patients.csv"
        sheet.write_text("Name,Age\nAsha,45\n", encoding="utf-8")
        code, output = self._run("import", str(sheet))
        self.assertEqual(code, 0)
        self.assertIn("Patients: 1", output)
        self.assertIn("Asha (age 45, male)", output)
        self.assertIn("Columns not found:", output)

    def test_score(self) -> None:
        records = self._tmp / "records.json"
        records.write_text(json.dumps([{"name": "X", "age": 30, "height": 165, "weight": 60}]), encoding="utf-8")
        code, output = self._run("score", str(records))
        self.assertEqual(code, 0)
        (record,) = json.loads(output)["data"]
        self.assertEqual(record["bmi"], 22.0)

    def test_errors(self) -> None:
        code, output = self._run("import", str(self._tmp / "missing.csv"))
        self.assertEqual(code, 1)
        self.assertIn("File not found", output)

        bad = self._tmp / "records.json"
        bad.write_text('{"name": "X"}', encoding="utf-8")
        code, output = self._run("score", str(bad))
        self.assertEqual(code, 1)
        self.assertIn("Expected a JSON array", output)

        code, _ = self._run()
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
