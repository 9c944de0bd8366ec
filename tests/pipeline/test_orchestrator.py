from __future__ import annotations

import threading
from typing import Any

import pytest

from pyqbank.extraction.metadata import infer_metadata
from pyqbank.extraction.models import BlockExtracted, BlockFailed, BlockSkipped, Difficulty, RawBlock
from pyqbank.jobs.models import JobNotFoundError, JobStatus, ProcessingJob
from pyqbank.jobs.store import InMemoryJobStore
from pyqbank.pipeline.orchestrator import ExtractionOrchestrator


PAPER = (
    "JEE Main Paper\n"
    "Q.1. If 2 + 3 = x then find the value of x from the given options carefully\n"
    "(1) 5 (2) 4 (3) 3 (4) 8\n"
    "Ans. (1)\n"
    "Sol. Adding the numbers gives five.\n"
    "Q.2. Read the passage below carefully and answer the questions that follow in this printed section of the paper\n"
    "Q.3. The value of the limit of the given sequence of positive real numbers is equal to which option\n"
    "(1) 0 (2) 1 (3) 2 (4) 3\n"
)

FILENAME = "2024-Mathematics Paper Morning.txt"


class RecordingJobStore(InMemoryJobStore):
    def __init__(self) -> None:
        super().__init__()
        self.updates: list[dict[str, Any]] = []

    def update(self, job_id: str, **changes: Any) -> ProcessingJob:
        self.updates.append(changes)
        return super().update(job_id, **changes)


class CancelAfterFirstBlockStore(InMemoryJobStore):
    def __init__(self, cancel_event: threading.Event) -> None:
        super().__init__()
        self._cancel_event = cancel_event

    def update(self, job_id: str, **changes: Any) -> ProcessingJob:
        if changes.get("processed_questions") == 1:
            self._cancel_event.set()
        return super().update(job_id, **changes)


def test_document_yields_extracted_skipped_and_failed_blocks() -> None:
    store = InMemoryJobStore()
    orchestrator = ExtractionOrchestrator(store, subject_resolver={"Mathematics": "subject-math"}.get)

    extraction = orchestrator.extract(PAPER, FILENAME)

    assert extraction.status is JobStatus.COMPLETED
    assert [type(outcome) for outcome in extraction.outcomes] == [BlockExtracted, BlockSkipped, BlockFailed]

    question = extraction.questions[0]
    assert question.stem == "If 2 + 3 = x then find the value of x from the given options carefully"
    assert [option.text for option in question.options] == ["5", "4", "3", "8"]
    assert question.options[0].is_correct is True
    assert question.difficulty is Difficulty.MEDIUM
    assert question.year_appeared == 2024
    assert question.is_previous_year is True
    assert question.subject_id == "subject-math"
    assert question.tag_names == ("Previous Year", "JEE Mains", "JEE 2024", "Morning")

    failure = extraction.failures[0]
    assert failure.index == 2
    assert failure.error == "Question must have exactly one correct option"
    assert failure.question is not None


def test_job_status_reflects_completed_document() -> None:
    store = InMemoryJobStore()
    orchestrator = ExtractionOrchestrator(store)

    extraction = orchestrator.extract(PAPER, FILENAME)
    job = orchestrator.get_status(extraction.job_id)

    assert job.status is JobStatus.COMPLETED
    assert job.progress == 100.0
    assert job.total_questions == 3
    assert job.processed_questions == 3
    assert [entry["questionIndex"] for entry in job.errors] == [2]
    assert job.results["totalQuestions"] == 3
    assert job.results["processedQuestions"] == 1
    assert job.results["errors"] == 1
    assert job.results["questions"][0]["subjectId"] is None


def test_progress_is_monotonic_through_the_stages() -> None:
    store = RecordingJobStore()
    orchestrator = ExtractionOrchestrator(store)

    orchestrator.extract(PAPER, FILENAME)

    progress = [changes["progress"] for changes in store.updates if "progress" in changes]
    statuses = [changes["status"] for changes in store.updates if "status" in changes]

    assert progress == sorted(progress)
    assert progress[:3] == [10.0, 30.0, 60.0]
    assert progress[-1] == 100.0
    assert statuses == [
        JobStatus.EXTRACTING_TEXT,
        JobStatus.PARSING_QUESTIONS,
        JobStatus.PROCESSING_QUESTIONS,
        JobStatus.COMPLETED,
    ]


def test_cancellation_is_checked_between_blocks() -> None:
    cancel_event = threading.Event()
    orchestrator = ExtractionOrchestrator(CancelAfterFirstBlockStore(cancel_event))

    extraction = orchestrator.extract(PAPER, FILENAME, cancel_event=cancel_event)
    job = orchestrator.get_status(extraction.job_id)

    assert extraction.status is JobStatus.CANCELLED
    assert len(extraction.outcomes) == 1
    assert len(extraction.questions) == 1
    assert job.status is JobStatus.CANCELLED
    assert job.processed_questions == 1
    assert 60.0 < job.progress < 100.0
    assert job.results["processedQuestions"] == 1


def test_whole_document_failure_marks_job_failed() -> None:
    def broken_resolver(name: str) -> str | None:
        raise RuntimeError(f"subject lookup unavailable for {name}")

    orchestrator = ExtractionOrchestrator(InMemoryJobStore(), subject_resolver=broken_resolver)

    extraction = orchestrator.extract(PAPER, FILENAME)
    job = orchestrator.get_status(extraction.job_id)

    assert extraction.status is JobStatus.FAILED
    assert extraction.outcomes == []
    assert job.status is JobStatus.FAILED
    assert job.error == "subject lookup unavailable for Mathematics"
    assert job.results is None


def test_document_without_questions_completes_empty() -> None:
    orchestrator = ExtractionOrchestrator(InMemoryJobStore())

    extraction = orchestrator.extract("short text", "notes.txt")
    job = orchestrator.get_status(extraction.job_id)

    assert extraction.status is JobStatus.COMPLETED
    assert job.total_questions == 0
    assert job.progress == 100.0
    assert job.results["questions"] == []


def test_extract_block_cleans_whitespace_and_math() -> None:
    orchestrator = ExtractionOrchestrator(InMemoryJobStore())
    block = RawBlock(
        index=0,
        text="Q.1. If   x^2 = 1/4 and alpha is\nacute then x is\n(1) 1/2 (2) 1/4\nAns. (1)",
    )

    outcome = orchestrator.extract_block(block, infer_metadata("2020-physics.txt"))

    assert isinstance(outcome, BlockExtracted)
    assert outcome.question.stem == r"If x^{2} = \frac{1}{4} and \alpha is acute then x is"
    assert [option.text for option in outcome.question.options] == [r"\frac{1}{2}", r"\frac{1}{4}"]
    assert outcome.question.year_appeared == 2020


def test_difficulty_is_scored_before_math_markup() -> None:
    orchestrator = ExtractionOrchestrator(InMemoryJobStore())
    block = RawBlock(index=0, text="Q.1. Find x^2 when x is three\n(1) 9 (2) 6\nAns. (1)")

    outcome = orchestrator.extract_block(block, infer_metadata("2020-maths.txt"))

    assert isinstance(outcome, BlockExtracted)
    assert outcome.question.stem == "Find x^{2} when x is three"
    assert outcome.question.difficulty is Difficulty.EASY


def test_unknown_job_status_raises() -> None:
    orchestrator = ExtractionOrchestrator(InMemoryJobStore())

    with pytest.raises(JobNotFoundError, match="job_missing"):
        orchestrator.get_status("job_missing")


def test_job_ids_are_opaque_and_unique() -> None:
    orchestrator = ExtractionOrchestrator(InMemoryJobStore())

    first = orchestrator.start_job()
    second = orchestrator.start_job()

    assert first != second
    assert first.startswith("job_")
    assert orchestrator.get_status(first).status is JobStatus.PROCESSING
