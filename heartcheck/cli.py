# -*- coding: utf-8 -*-
"""
CLI tool for scoring patient spreadsheets offline.

Usage:
    python -m heartcheck.cli import <file> [--calculate] [--json]
    python -m heartcheck.cli score <records.json>
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .assessment.importer import calculate_records, process_spreadsheet
from .assessment.models import DiscoveredFields, ImportAction, PatientAssessment
from .errors import HeartCheckError


def _print_records(records: List[PatientAssessment]) -> None:
    for i, record in enumerate(records, 1):
        line = f"{i:>4}. {record.name} (age {record.age}, {record.gender}) BP {record.systolic}/{record.diastolic} BMI {record.bmi}"
        if record.risk_score is not None:
            line += f" | risk {record.risk_score}% | heart age {record.heart_age}"
        print(line)


def _print_discovery(discovery: DiscoveredFields) -> None:
    missing = [name for name, found in discovery.model_dump().items() if not found]
    if missing:
        print(f"Columns not found: {', '.join(missing)}")
    else:
        print("All expected columns found.")


def cmd_import(args: argparse.Namespace) -> int:
    """Normalize (and optionally score) a local spreadsheet."""
    source = Path(args.source)
    if not source.is_file():
        print(f"Error: File not found: {source}")
        return 1

    mode = ImportAction.calculate if args.calculate else ImportAction.parse
    try:
        result = process_spreadsheet(source.read_bytes(), mode)
    except HeartCheckError as exc:
        print(f"Error: {exc}")
        return 1

    if args.json:
        payload = {
            "data": [record.model_dump(mode="json") for record in result.records],
            "discovery": result.discovery.model_dump(),
            "diagnostic": result.diagnostic,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"Rows read: {result.row_count}")
    print(f"Patients: {len(result.records)}")
    print("-" * 50)
    _print_records(result.records)
    print("-" * 50)
    _print_discovery(result.discovery)
    if result.diagnostic:
        print(f"Diagnostic: {result.diagnostic}")
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    """Recalculate derived fields for a JSON array of records."""
    source = Path(args.source)
    if not source.is_file():
        print(f"Error: File not found: {source}")
        return 1
    try:
        items = json.loads(source.read_text(encoding="utf-8"))
    except ValueError as exc:
        print(f"Error: Invalid JSON: {exc}")
        return 1
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        print("Error: Expected a JSON array of objects")
        return 1

    records = calculate_records(items)
    print(json.dumps({"data": [r.model_dump(mode="json") for r in records]}, ensure_ascii=False, indent=2))
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Heart check spreadsheet CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log import progress",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # import command
    import_parser = subparsers.add_parser("import", help="Import a spreadsheet (.xlsx or .csv)")
    import_parser.add_argument("source", help="Spreadsheet file")
    import_parser.add_argument(
        "--calculate",
        action="store_true",
        help="Also compute risk score and heart age",
    )
    import_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full JSON payload",
    )

    # score command
    score_parser = subparsers.add_parser("score", help="Score a JSON array of records")
    score_parser.add_argument("source", help="JSON file")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "import": cmd_import,
        "score": cmd_score,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
