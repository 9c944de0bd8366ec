"""CLI command for querying a processing job's status."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from dotenv import load_dotenv

from pyqbank.config import Settings
from pyqbank.jobs.models import JobNotFoundError
from pyqbank.jobs.store import SqliteJobStore
from pyqbank.pipeline.orchestrator import ExtractionOrchestrator


load_dotenv()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show the status of an extraction job")
    parser.add_argument("--job-id", required=True, help="Job identifier printed by extract_paper")
    parser.add_argument("--db-path", default=None, help="SQLite database path (defaults to PYQBANK_DB_PATH)")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    settings.configure_logging()
    db_path = Path(args.db_path) if args.db_path else settings.db_path

    with SqliteJobStore(db_path) as job_store:
        try:
            job = ExtractionOrchestrator(job_store).get_status(args.job_id)
        except JobNotFoundError as exc:
            print(json.dumps({"jobId": args.job_id, "error": str(exc)}, ensure_ascii=True, indent=2))
            return 1

    print(json.dumps(job.to_dict(), ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
