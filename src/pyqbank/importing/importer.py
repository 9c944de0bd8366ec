"""Validate, de-duplicate and persist batches of extracted questions."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Mapping, Protocol, Sequence

from pyqbank.extraction.models import ExtractedQuestion
from pyqbank.extraction.validator import validate_question
from pyqbank.importing.dedupe import StemFingerprintRegistry
from pyqbank.storage.repository import StorageError

logger = logging.getLogger(__name__)

DUPLICATE_ERROR = "Duplicate question (normalized stem match)"


class QuestionStore(Protocol):
    """Record-store capability the importer writes through."""

    def has_stem_fingerprint(self, fingerprint: str) -> bool:
        """Return True when a stored question already has this fingerprint."""

    def create_question(self, question: ExtractedQuestion, *, stem_fingerprint: str) -> str:
        """Persist question, options and tags atomically and return the new id."""


@dataclass(slots=True)
class ImportFailure:
    index: int
    error: str
    question: Any

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "error": self.error, "question": self.question}


@dataclass(slots=True)
class ImportResult:
    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: list[ImportFailure] = field(default_factory=list)
    question_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "errors": [error.to_dict() for error in self.errors],
            "questionIds": list(self.question_ids),
        }


def _record_payload(record: object) -> Any:
    if isinstance(record, ExtractedQuestion):
        return record.to_dict()
    if isinstance(record, Mapping):
        return dict(record)
    return record


class QuestionImporter:
    """Import/dedup stage: partial batch success is the normal outcome."""

    def __init__(self, store: QuestionStore, *, skip_duplicates: bool = True) -> None:
        self._store = store
        self._skip_duplicates = skip_duplicates

    def bulk_import(
        self,
        records: Sequence[ExtractedQuestion | Mapping[str, Any]],
        *,
        batch_name: str | None = None,
    ) -> ImportResult:
        result = ImportResult(total=len(records))
        registry = StemFingerprintRegistry(self._store.has_stem_fingerprint if self._skip_duplicates else None)

        for index, record in enumerate(records):
            error = self._import_one(index, record, registry, result)
            if error is None:
                continue
            logger.warning("Import of question %d failed: %s", index, error)
            result.failed += 1
            result.errors.append(ImportFailure(index=index, error=error, question=_record_payload(record)))

        logger.info(
            "Bulk import%s completed: %d/%d questions imported successfully",
            f" '{batch_name}'" if batch_name else "",
            result.successful,
            result.total,
        )
        return result

    def _import_one(
        self,
        index: int,
        record: ExtractedQuestion | Mapping[str, Any],
        registry: StemFingerprintRegistry,
        result: ImportResult,
    ) -> str | None:
        """Import a single record, returning an error message on failure."""

        try:
            question = record if isinstance(record, ExtractedQuestion) else ExtractedQuestion.from_dict(record)
        except (TypeError, ValueError) as exc:
            return f"Malformed question record: {exc}"

        problems = validate_question(question)
        if problems:
            return "; ".join(problems)

        decision = registry.evaluate(question.stem)
        if self._skip_duplicates and decision.is_duplicate:
            return DUPLICATE_ERROR

        try:
            question_id = self._store.create_question(question, stem_fingerprint=decision.fingerprint)
        except StorageError as exc:
            return str(exc)

        registry.remember(decision.fingerprint)
        result.successful += 1
        result.question_ids.append(question_id)
        logger.debug("Imported question %d as %s", index, question_id)
        return None
