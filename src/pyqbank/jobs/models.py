"""Processing job status records shared by the orchestrator and job stores."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class JobStatus(Enum):
    PROCESSING = "processing"
    EXTRACTING_TEXT = "extracting_text"
    PARSING_QUESTIONS = "parsing_questions"
    PROCESSING_QUESTIONS = "processing_questions"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class JobNotFoundError(LookupError):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class ProcessingJob:
    job_id: str
    status: JobStatus = JobStatus.PROCESSING
    progress: float = 0.0
    total_questions: int = 0
    processed_questions: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)
    results: dict[str, Any] | None = None
    error: str | None = None
    started_at: str = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "jobId": self.job_id,
            "status": self.status.value,
            "progress": self.progress,
            "totalQuestions": self.total_questions,
            "processedQuestions": self.processed_questions,
            "errors": list(self.errors),
            "results": self.results,
            "error": self.error,
            "startedAt": self.started_at,
        }


JOB_FIELDS = frozenset(item.name for item in fields(ProcessingJob)) - {"job_id"}
