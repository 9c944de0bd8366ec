"""Per-document extraction pipeline with job progress reporting.

The orchestrator drives metadata inference and segmentation once, then
extracts each block in source order. Block-level problems become tagged
outcomes and never abort the document; only failures before the block loop
mark the job as failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import threading
from typing import Callable
import uuid

from pyqbank.extraction.difficulty import estimate_difficulty
from pyqbank.extraction.fields import BlockFields, NotAQuestion, extract_fields
from pyqbank.extraction.math_markup import normalize_math
from pyqbank.extraction.metadata import build_tag_names, infer_metadata
from pyqbank.extraction.models import (
    BlockExtracted,
    BlockFailed,
    BlockOutcome,
    BlockSkipped,
    DocumentMetadata,
    ExtractedQuestion,
    RawBlock,
)
from pyqbank.extraction.normalization import normalize_whitespace
from pyqbank.extraction.segmenter import split_into_blocks
from pyqbank.extraction.validator import validate_question
from pyqbank.jobs.models import JobNotFoundError, JobStatus, ProcessingJob
from pyqbank.jobs.store import JobStore

logger = logging.getLogger(__name__)

TEXT_READY_PROGRESS = 10.0
SEGMENTED_PROGRESS = 30.0
BLOCK_LOOP_START_PROGRESS = 60.0
COMPLETE_PROGRESS = 100.0

SubjectResolver = Callable[[str], "str | None"]


@dataclass(slots=True)
class DocumentExtraction:
    """Everything one orchestration pass produced for a document."""

    job_id: str
    status: JobStatus
    metadata: DocumentMetadata | None = None
    outcomes: list[BlockOutcome] = field(default_factory=list)
    error: str | None = None

    @property
    def questions(self) -> list[ExtractedQuestion]:
        return [outcome.question for outcome in self.outcomes if isinstance(outcome, BlockExtracted)]

    @property
    def failures(self) -> list[BlockFailed]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, BlockFailed)]

    @property
    def skipped(self) -> list[BlockSkipped]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, BlockSkipped)]


def _clean(text: str) -> str:
    return normalize_math(normalize_whitespace(text))


def _block_progress(processed: int, total: int) -> float:
    span = COMPLETE_PROGRESS - BLOCK_LOOP_START_PROGRESS
    return BLOCK_LOOP_START_PROGRESS + span * processed / total


def _failure_entry(outcome: BlockFailed) -> dict[str, object]:
    return {
        "questionIndex": outcome.index,
        "error": outcome.error,
        "question": outcome.question.to_dict() if outcome.question is not None else None,
    }


class ExtractionOrchestrator:
    """Turn one document's raw text into validated question records."""

    def __init__(
        self,
        job_store: JobStore,
        *,
        subject_resolver: SubjectResolver | None = None,
    ) -> None:
        self._jobs = job_store
        self._subject_resolver = subject_resolver

    def start_job(self) -> str:
        job_id = f"job_{uuid.uuid4().hex}"
        self._jobs.set(ProcessingJob(job_id=job_id))
        return job_id

    def get_status(self, job_id: str) -> ProcessingJob:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def fail_job(self, job_id: str, message: str) -> ProcessingJob:
        return self._jobs.update(job_id, status=JobStatus.FAILED, error=message)

    def extract(
        self,
        raw_text: str,
        filename: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> DocumentExtraction:
        """Create a job and process the document under it."""

        job_id = self.start_job()
        return self.process_document(job_id, raw_text, filename, cancel_event=cancel_event)

    def process_document(
        self,
        job_id: str,
        raw_text: str,
        filename: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> DocumentExtraction:
        logger.info("Extraction started for %s (job %s)", filename, job_id)
        self._jobs.update(job_id, status=JobStatus.EXTRACTING_TEXT, progress=TEXT_READY_PROGRESS)

        try:
            self._jobs.update(job_id, status=JobStatus.PARSING_QUESTIONS)
            metadata = infer_metadata(filename)
            subject_id = self._resolve_subject(metadata)
            tag_names = build_tag_names(metadata)
            blocks = [RawBlock(index=index, text=text) for index, text in enumerate(split_into_blocks(raw_text))]
        except Exception as exc:
            logger.exception("Extraction failed for %s (job %s)", filename, job_id)
            self.fail_job(job_id, str(exc))
            return DocumentExtraction(job_id=job_id, status=JobStatus.FAILED, error=str(exc))

        self._jobs.update(job_id, progress=SEGMENTED_PROGRESS)
        self._jobs.update(
            job_id,
            status=JobStatus.PROCESSING_QUESTIONS,
            progress=BLOCK_LOOP_START_PROGRESS,
            total_questions=len(blocks),
        )

        outcomes: list[BlockOutcome] = []
        errors: list[dict[str, object]] = []
        cancelled = False
        progress = BLOCK_LOOP_START_PROGRESS

        for block in blocks:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Extraction cancelled for job %s after %d block(s)", job_id, len(outcomes))
                cancelled = True
                break

            outcome = self.extract_block(block, metadata, subject_id=subject_id, tag_names=tag_names)
            outcomes.append(outcome)
            if isinstance(outcome, BlockFailed):
                errors.append(_failure_entry(outcome))

            processed = block.index + 1
            progress = _block_progress(processed, len(blocks))
            self._jobs.update(job_id, processed_questions=processed, progress=progress, errors=errors)

        extraction = DocumentExtraction(
            job_id=job_id,
            status=JobStatus.CANCELLED if cancelled else JobStatus.COMPLETED,
            metadata=metadata,
            outcomes=outcomes,
        )
        questions = extraction.questions
        self._jobs.update(
            job_id,
            status=extraction.status,
            progress=progress if cancelled else COMPLETE_PROGRESS,
            results={
                "totalQuestions": len(blocks),
                "processedQuestions": len(questions),
                "errors": len(errors),
                "questions": [question.to_dict() for question in questions],
            },
        )
        logger.info(
            "Extraction %s for %s: %d extracted, %d failed, %d skipped",
            extraction.status.value,
            filename,
            len(questions),
            len(errors),
            len(extraction.skipped),
        )
        return extraction

    def extract_block(
        self,
        block: RawBlock,
        metadata: DocumentMetadata,
        *,
        subject_id: str | None = None,
        tag_names: tuple[str, ...] = (),
    ) -> BlockOutcome:
        """Extract, normalize, label and validate a single block."""

        try:
            fields = extract_fields(block.text)
            question = self._build_question(fields, metadata, subject_id=subject_id, tag_names=tag_names)
        except NotAQuestion as exc:
            logger.debug("Skipped block %d: %s", block.index, exc)
            return BlockSkipped(index=block.index, reason=str(exc))
        except Exception as exc:
            logger.warning("Failed to parse block %d: %s", block.index, exc)
            return BlockFailed(index=block.index, error=str(exc))

        problems = validate_question(question)
        if problems:
            logger.warning("Block %d failed validation: %s", block.index, "; ".join(problems))
            return BlockFailed(index=block.index, error="; ".join(problems), question=question)
        return BlockExtracted(index=block.index, question=question)

    def _build_question(
        self,
        fields: BlockFields,
        metadata: DocumentMetadata,
        *,
        subject_id: str | None,
        tag_names: tuple[str, ...],
    ) -> ExtractedQuestion:
        # Markup adds braces and backslashes, so difficulty is scored on plain text.
        plain_stem = normalize_whitespace(fields.stem)
        return ExtractedQuestion(
            stem=normalize_math(plain_stem),
            options=tuple(replace(option, text=_clean(option.text)) for option in fields.options),
            explanation=_clean(fields.explanation) if fields.explanation else None,
            difficulty=estimate_difficulty(plain_stem),
            year_appeared=metadata.year,
            is_previous_year=True,
            subject_id=subject_id,
            tag_names=tag_names,
        )

    def _resolve_subject(self, metadata: DocumentMetadata) -> str | None:
        if metadata.subject is None or self._subject_resolver is None:
            return None
        return self._subject_resolver(metadata.subject.value)
