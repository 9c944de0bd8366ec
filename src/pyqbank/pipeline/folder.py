"""Run the extraction pipeline over a file or a folder of papers."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from pyqbank.ingestion.loader import DocumentLoadError, DocumentLoader
from pyqbank.jobs.models import JobStatus
from pyqbank.pipeline.orchestrator import DocumentExtraction, ExtractionOrchestrator

logger = logging.getLogger(__name__)

@dataclass(slots=True)
class FolderResult:
    total_files: int = 0
    processed_files: int = 0
    total_questions: int = 0
    errors: list[dict[str, str]] = field(default_factory=list)
    extractions: list[DocumentExtraction] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "totalFiles": self.total_files,
            "processedFiles": self.processed_files,
            "totalQuestions": self.total_questions,
            "errors": list(self.errors),
        }


def collect_inputs(target: Path, loader: DocumentLoader) -> list[Path]:
    """A single file is always returned; folder entries are kept when an adapter claims them."""

    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(
            path for path in target.iterdir() if path.is_file() and loader.supports(path)
        )
    return []


def process_file(path: Path, *, loader: DocumentLoader, orchestrator: ExtractionOrchestrator) -> DocumentExtraction:
    """Load one paper under a fresh job; unreadable files fail that job."""

    job_id = orchestrator.start_job()
    try:
        document = loader.load(path)
    except DocumentLoadError as exc:
        logger.error("Could not load %s: %s", path, exc)
        orchestrator.fail_job(job_id, str(exc))
        return DocumentExtraction(job_id=job_id, status=JobStatus.FAILED, error=str(exc))
    return orchestrator.process_document(job_id, document.text, document.filename)


def process_folder(
    target: Path,
    *,
    loader: DocumentLoader,
    orchestrator: ExtractionOrchestrator,
) -> FolderResult:
    """Process each supported file independently, one job per file."""

    files = collect_inputs(target, loader)
    result = FolderResult(total_files=len(files))

    for path in files:
        extraction = process_file(path, loader=loader, orchestrator=orchestrator)
        result.extractions.append(extraction)
        if extraction.status == JobStatus.FAILED:
            result.errors.append({"file": path.name, "error": extraction.error or "unknown error"})
            continue
        result.processed_files += 1
        result.total_questions += len(extraction.questions)

    return result
