"""Structural validation for extracted or externally supplied questions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from pyqbank.extraction.models import ExtractedQuestion

BULK_MIN_STEM_LENGTH = 10
MIN_OPTIONS = 2

STEM_TOO_SHORT = "Question stem is too short or missing"
STEM_MISSING = "Question stem is missing"
TOO_FEW_OPTIONS = "Question must have at least 2 options"
NOT_SINGLE_CORRECT = "Question must have exactly one correct option"


@dataclass(slots=True)
class ValidationIssue:
    index: int
    errors: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "errors": list(self.errors)}


@dataclass(slots=True)
class ValidationReport:
    valid: int = 0
    invalid: int = 0
    errors: list[ValidationIssue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "invalid": self.invalid,
            "errors": [issue.to_dict() for issue in self.errors],
        }


def validate_question(question: ExtractedQuestion, *, min_stem_length: int = 1) -> list[str]:
    """Return human-readable problems; an empty list means importable.

    The import gate only needs a stem to be present, while the standalone
    bulk-validate check asks for at least ``BULK_MIN_STEM_LENGTH`` characters.
    """

    errors: list[str] = []

    stem_length = len(question.stem.strip())
    if min_stem_length > 1 and stem_length < min_stem_length:
        errors.append(STEM_TOO_SHORT)
    elif stem_length == 0:
        errors.append(STEM_MISSING)

    if len(question.options) < MIN_OPTIONS:
        errors.append(TOO_FEW_OPTIONS)
    elif question.correct_count != 1:
        errors.append(NOT_SINGLE_CORRECT)

    return errors


def validate_questions(records: Sequence[ExtractedQuestion | Mapping[str, Any]]) -> ValidationReport:
    """Validate a batch without importing it, reporting problems by index."""

    report = ValidationReport()
    for index, record in enumerate(records):
        try:
            question = record if isinstance(record, ExtractedQuestion) else ExtractedQuestion.from_dict(record)
        except (TypeError, ValueError) as exc:
            errors = [f"Malformed question record: {exc}"]
        else:
            errors = validate_question(question, min_stem_length=BULK_MIN_STEM_LENGTH)

        if errors:
            report.invalid += 1
            report.errors.append(ValidationIssue(index=index, errors=errors))
        else:
            report.valid += 1
    return report
