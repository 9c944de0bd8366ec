"""Job status stores injected into the extraction orchestrator.

Updates always write absolute values keyed by job id, so replaying the same
update is harmless.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
import sqlite3
import threading
from typing import Any, Protocol, runtime_checkable

from pyqbank.jobs.models import JOB_FIELDS, JobNotFoundError, JobStatus, ProcessingJob
from pyqbank.storage.schema import apply_runtime_pragmas, ensure_schema


@runtime_checkable
class JobStore(Protocol):
    """Capability the orchestrator uses to publish job progress."""

    def get(self, job_id: str) -> ProcessingJob | None:
        """Return a snapshot of the job or None when unknown."""

    def set(self, job: ProcessingJob) -> None:
        """Create or replace a job record."""

    def update(self, job_id: str, **changes: Any) -> ProcessingJob:
        """Apply field changes to an existing job and return the new snapshot."""


def _check_fields(changes: dict[str, Any]) -> None:
    unknown = set(changes) - JOB_FIELDS
    if unknown:
        raise ValueError(f"Unknown job fields: {', '.join(sorted(unknown))}")


class InMemoryJobStore:
    """Process-local store; snapshots are deep copies so callers cannot alias state."""

    def __init__(self) -> None:
        self._jobs: dict[str, ProcessingJob] = {}
        self._lock = threading.Lock()

    def get(self, job_id: str) -> ProcessingJob | None:
        with self._lock:
            job = self._jobs.get(job_id)
            return copy.deepcopy(job) if job is not None else None

    def set(self, job: ProcessingJob) -> None:
        with self._lock:
            self._jobs[job.job_id] = copy.deepcopy(job)

    def update(self, job_id: str, **changes: Any) -> ProcessingJob:
        _check_fields(changes)
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            for name, value in changes.items():
                setattr(job, name, copy.deepcopy(value))
            return copy.deepcopy(job)


class SqliteJobStore:
    """SQLite-backed store so job status survives process restarts."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._connection = sqlite3.connect(str(self._db_path), check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        apply_runtime_pragmas(self._connection)
        ensure_schema(self._connection)

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "SqliteJobStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get(self, job_id: str) -> ProcessingJob | None:
        with self._lock:
            return self._fetch(job_id)

    def set(self, job: ProcessingJob) -> None:
        with self._lock, self._connection:
            self._write(job)

    def update(self, job_id: str, **changes: Any) -> ProcessingJob:
        _check_fields(changes)
        with self._lock, self._connection:
            job = self._fetch(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            for name, value in changes.items():
                setattr(job, name, value)
            self._write(job)
        return job

    def _fetch(self, job_id: str) -> ProcessingJob | None:
        # Callers hold self._lock.
        row = self._connection.execute(
            "SELECT * FROM processing_jobs WHERE job_id = ?",
            (job_id,),
        ).fetchone()
        return self._row_to_job(row) if row is not None else None

    def _write(self, job: ProcessingJob) -> None:
        self._connection.execute(
            """
            INSERT INTO processing_jobs (
                job_id, status, progress, total_questions, processed_questions,
                errors_json, results_json, error, started_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(job_id) DO UPDATE SET
                status = excluded.status,
                progress = excluded.progress,
                total_questions = excluded.total_questions,
                processed_questions = excluded.processed_questions,
                errors_json = excluded.errors_json,
                results_json = excluded.results_json,
                error = excluded.error,
                started_at = excluded.started_at,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                job.job_id,
                job.status.value,
                job.progress,
                job.total_questions,
                job.processed_questions,
                json.dumps(job.errors, ensure_ascii=False),
                json.dumps(job.results, ensure_ascii=False) if job.results is not None else None,
                job.error,
                job.started_at,
            ),
        )

    @staticmethod
    def _row_to_job(row: sqlite3.Row) -> ProcessingJob:
        results_json = row["results_json"]
        return ProcessingJob(
            job_id=row["job_id"],
            status=JobStatus(row["status"]),
            progress=float(row["progress"]),
            total_questions=int(row["total_questions"]),
            processed_questions=int(row["processed_questions"]),
            errors=json.loads(row["errors_json"]),
            results=json.loads(results_json) if results_json is not None else None,
            error=row["error"],
            started_at=row["started_at"],
        )
