"""CLI command for validating question records without importing them."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from pyqbank.config import Settings
from pyqbank.extraction.validator import validate_questions
from pyqbank.importing.records import read_question_records


load_dotenv()

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate question records from a JSON file")
    parser.add_argument("--path", required=True, help="JSON file with a questions array")
    args = parser.parse_args(argv)

    Settings.from_env().configure_logging()

    try:
        records = read_question_records(Path(args.path))
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not read question records from %s: %s", args.path, exc)
        return 2

    report = validate_questions(records)
    print(json.dumps(report.to_dict(), ensure_ascii=True, indent=2))
    return 0 if report.invalid == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
