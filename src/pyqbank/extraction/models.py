"""Canonical data structures shared by the extraction pipeline and importer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union


class Subject(Enum):
    MATHEMATICS = "Mathematics"
    PHYSICS = "Physics"
    CHEMISTRY = "Chemistry"


class Shift(Enum):
    MORNING = "Morning"
    EVENING = "Evening"


class Difficulty(Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

    @classmethod
    def parse(cls, raw: object) -> "Difficulty":
        """Accept enum values case-insensitively ("Easy", "HARD", ...)."""

        if isinstance(raw, Difficulty):
            return raw
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown difficulty: {raw!r}") from None


@dataclass(frozen=True, slots=True)
class DocumentMetadata:
    """Provenance inferred once per source document."""

    year: int | None = None
    subject: Subject | None = None
    shift: Shift | None = None


@dataclass(frozen=True, slots=True)
class RawBlock:
    """A slice of source text believed to contain exactly one question."""

    index: int
    text: str


@dataclass(frozen=True, slots=True)
class ExtractedOption:
    text: str
    is_correct: bool
    order: int

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "isCorrect": self.is_correct, "order": self.order}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], *, default_order: int) -> "ExtractedOption":
        if not isinstance(payload, Mapping):
            raise ValueError(f"Option {default_order} is not an object")
        is_correct = payload.get("isCorrect", False)
        if not isinstance(is_correct, bool):
            raise ValueError(f"Option {default_order} isCorrect must be true or false, got {is_correct!r}")
        order = payload.get("order")
        return cls(
            text=str(payload.get("text") or ""),
            is_correct=is_correct,
            order=default_order if order is None else int(order),
        )


@dataclass(frozen=True, slots=True)
class ExtractedQuestion:
    """Structured question record; immutable once built."""

    stem: str
    options: tuple[ExtractedOption, ...]
    explanation: str | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    year_appeared: int | None = None
    is_previous_year: bool = True
    subject_id: str | None = None
    tag_names: tuple[str, ...] = ()

    @property
    def correct_count(self) -> int:
        return sum(1 for option in self.options if option.is_correct)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stem": self.stem,
            "explanation": self.explanation,
            "difficulty": self.difficulty.value,
            "yearAppeared": self.year_appeared,
            "isPreviousYear": self.is_previous_year,
            "subjectId": self.subject_id,
            "options": [option.to_dict() for option in self.options],
            "tagNames": list(self.tag_names),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ExtractedQuestion":
        """Build a record from the camelCase JSON shape used by bulk import.

        Missing fields fall back to defaults so that structurally incomplete
        records still reach the validator and get reported there.
        """

        if not isinstance(payload, Mapping):
            raise ValueError("Question record is not an object")

        raw_options = payload.get("options")
        options: tuple[ExtractedOption, ...] = ()
        if isinstance(raw_options, list):
            options = tuple(
                ExtractedOption.from_dict(item, default_order=index) for index, item in enumerate(raw_options)
            )

        year = payload.get("yearAppeared")
        difficulty = payload.get("difficulty")
        explanation = payload.get("explanation")
        subject_id = payload.get("subjectId")
        tag_names = payload.get("tagNames") or ()

        return cls(
            stem=str(payload.get("stem") or ""),
            options=options,
            explanation=str(explanation) if explanation else None,
            difficulty=Difficulty.MEDIUM if difficulty is None else Difficulty.parse(difficulty),
            year_appeared=None if year is None else int(year),
            is_previous_year=bool(payload.get("isPreviousYear", year is not None)),
            subject_id=str(subject_id) if subject_id else None,
            tag_names=tuple(str(name) for name in tag_names if str(name).strip()),
        )


@dataclass(frozen=True, slots=True)
class BlockExtracted:
    index: int
    question: ExtractedQuestion


@dataclass(frozen=True, slots=True)
class BlockSkipped:
    """Block that did not look like a question; intentionally not an error."""

    index: int
    reason: str


@dataclass(frozen=True, slots=True)
class BlockFailed:
    index: int
    error: str
    question: ExtractedQuestion | None = None


BlockOutcome = Union[BlockExtracted, BlockSkipped, BlockFailed]
