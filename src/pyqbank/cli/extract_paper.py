"""CLI command for extracting questions from paper files with optional import."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from pyqbank.config import Settings
from pyqbank.importing.importer import QuestionImporter
from pyqbank.ingestion.adapters import build_default_adapters
from pyqbank.ingestion.loader import DocumentLoader
from pyqbank.jobs.store import SqliteJobStore
from pyqbank.pipeline.folder import process_folder
from pyqbank.pipeline.orchestrator import ExtractionOrchestrator
from pyqbank.storage.repository import QuestionRepository


load_dotenv()

LOGGER = logging.getLogger(__name__)


def _build_loader() -> DocumentLoader:
    loader = DocumentLoader()
    for name, adapter in build_default_adapters().items():
        loader.register_adapter(name, adapter)
    return loader


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract questions from previous-year papers")
    parser.add_argument("--path", required=True, help="Paper file or folder of papers (.pdf, .txt)")
    parser.add_argument("--db-path", default=None, help="SQLite database path (defaults to PYQBANK_DB_PATH)")
    parser.add_argument(
        "--import",
        dest="import_questions",
        action="store_true",
        help="Import extracted questions into the question bank",
    )
    parser.add_argument(
        "--no-skip-duplicates",
        action="store_true",
        help="Import questions even when an identical stem is already stored",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = Settings.from_env()
    settings.configure_logging()

    source_path = Path(args.path)
    if not source_path.exists():
        LOGGER.error("path does not exist: %s", source_path)
        return 2

    db_path = Path(args.db_path) if args.db_path else settings.db_path
    skip_duplicates = settings.skip_duplicates and not args.no_skip_duplicates

    with QuestionRepository(db_path) as repository, SqliteJobStore(db_path) as job_store:
        orchestrator = ExtractionOrchestrator(job_store, subject_resolver=repository.find_subject_id)
        folder = process_folder(source_path, loader=_build_loader(), orchestrator=orchestrator)

        payload: dict[str, object] = {"path": str(source_path), **folder.to_dict()}
        payload["jobs"] = [orchestrator.get_status(extraction.job_id).to_dict() for extraction in folder.extractions]
        has_failures = bool(folder.errors) or any(extraction.failures for extraction in folder.extractions)

        if args.import_questions:
            importer = QuestionImporter(repository, skip_duplicates=skip_duplicates)
            imports: list[dict[str, object]] = []
            for extraction in folder.extractions:
                result = importer.bulk_import(extraction.questions, batch_name=extraction.job_id)
                imports.append({"jobId": extraction.job_id, **result.to_dict()})
                has_failures = has_failures or result.failed > 0
            payload["imports"] = imports

    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 1 if has_failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
