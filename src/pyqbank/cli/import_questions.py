"""CLI command for direct bulk import of question records from JSON."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from pyqbank.config import Settings
from pyqbank.importing.importer import QuestionImporter
from pyqbank.importing.records import read_question_records
from pyqbank.storage.repository import QuestionRepository


load_dotenv()

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import question records from a JSON file")
    parser.add_argument("--path", required=True, help="JSON file with a questions array")
    parser.add_argument("--db-path", default=None, help="SQLite database path (defaults to PYQBANK_DB_PATH)")
    parser.add_argument("--batch-name", default=None, help="Label used in import logs")
    parser.add_argument(
        "--no-skip-duplicates",
        action="store_true",
        help="Import questions even when an identical stem is already stored",
    )
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    settings.configure_logging()

    try:
        records = read_question_records(Path(args.path))
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not read question records from %s: %s", args.path, exc)
        return 2

    db_path = Path(args.db_path) if args.db_path else settings.db_path
    with QuestionRepository(db_path) as repository:
        importer = QuestionImporter(
            repository,
            skip_duplicates=settings.skip_duplicates and not args.no_skip_duplicates,
        )
        result = importer.bulk_import(records, batch_name=args.batch_name)

    print(json.dumps(result.to_dict(), ensure_ascii=True, indent=2))
    return 0 if result.failed == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
