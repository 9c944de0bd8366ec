"""Filename-based provenance inference for exam paper documents."""

from __future__ import annotations

import re

from pyqbank.extraction.models import DocumentMetadata, Shift, Subject

PREVIOUS_YEAR_TAG = "Previous Year"
EXAM_TAG = "JEE Mains"
YEAR_TAG_PREFIX = "JEE"

_YEAR_RE = re.compile(r"\d{4}")

# First matching entry wins; a filename naming two subjects is not flagged.
_SUBJECT_TOKENS: tuple[tuple[tuple[str, ...], Subject], ...] = (
    (("mathematics", "maths"), Subject.MATHEMATICS),
    (("physics",), Subject.PHYSICS),
    (("chemistry",), Subject.CHEMISTRY),
)

_SHIFT_TOKENS: tuple[tuple[str, Shift], ...] = (
    ("morning", Shift.MORNING),
    ("evening", Shift.EVENING),
)


def infer_metadata(filename: str) -> DocumentMetadata:
    """Derive year, subject and shift from a paper's filename.

    ``"2201-Mathematics Paper+With+Sol. Evening.pdf"`` yields year 2201,
    Mathematics and the Evening shift. The year is the first run of four
    digits and is not checked for plausibility.
    """

    lowered = filename.casefold()

    year_match = _YEAR_RE.search(filename)
    year = int(year_match.group(0)) if year_match else None

    subject = next(
        (subject for tokens, subject in _SUBJECT_TOKENS if any(token in lowered for token in tokens)),
        None,
    )
    shift = next((shift for token, shift in _SHIFT_TOKENS if token in lowered), None)

    return DocumentMetadata(year=year, subject=subject, shift=shift)


def build_tag_names(metadata: DocumentMetadata) -> tuple[str, ...]:
    tags = [PREVIOUS_YEAR_TAG, EXAM_TAG]
    if metadata.year is not None:
        tags.append(f"{YEAR_TAG_PREFIX} {metadata.year}")
    if metadata.shift is not None:
        tags.append(metadata.shift.value)
    return tuple(tags)
