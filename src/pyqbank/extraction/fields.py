"""Field extraction for a single question block.

Each concern (answer key, options, explanation) is an ordered cascade of
(name, pattern or strategy) pairs; the first entry that succeeds wins.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable

from pyqbank.extraction.models import ExtractedOption
from pyqbank.extraction.normalization import normalize_whitespace

MIN_OPTIONS = 2


class NotAQuestion(Exception):
    """Raised when a block has no stem or too few options to be a question."""


@dataclass(frozen=True, slots=True)
class AnswerKey:
    style: str
    value: str

    @property
    def option_index(self) -> int:
        if self.style == "numeric":
            return int(self.value) - 1
        return ord(self.value.lower()) - ord("a")


@dataclass(frozen=True, slots=True)
class BlockFields:
    stem: str
    options: tuple[ExtractedOption, ...]
    explanation: str | None
    answer_key: AnswerKey | None


ANSWER_KEY_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("numeric", re.compile(r"Ans\.\s*\((\d+)\)", re.IGNORECASE)),
    ("alphabetic", re.compile(r"answer[:\s]*([a-d])\b", re.IGNORECASE)),
)

EXPLANATION_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (
        header,
        re.compile(
            rf"^[ \t]*{header}[:\s]*(.+?)(?=\n[ \t]*\n|\n(?-i:[A-Z])|\Z)",
            re.IGNORECASE | re.MULTILINE | re.DOTALL,
        ),
    )
    for header in ("solution", "explanation", "answer")
)

_QUESTION_NUMBER_LINE_RE = re.compile(r"^Q\.?\s*\d+\.?\s*$", re.IGNORECASE)
_LEADING_MARKER_RE = re.compile(r"^(?:Q\.?\s*|Question\s*)?\d+\.(?!\d)\s*", re.IGNORECASE)

_NUMBERED_OPTION_LINE_RE = re.compile(r"\(\d+\)\s+\d+")
_LETTERED_OPTION_LINE_RE = re.compile(r"^\(?[a-d]\)\s+", re.IGNORECASE)
_NUMBERED_OPTION_RE = re.compile(r"\((\d+)\)\s+([^(]+?)(?=\s*\(\d+\)|\s*\Z)")
_LETTERED_OPTION_RE = re.compile(r"\(?([a-d])\)\s+(.+?)(?=\s+\(?[a-d]\)\s|\s*\Z)", re.IGNORECASE)

# Answer keys and solutions that trail the option list end the option region.
_OPTION_REGION_END_RE = re.compile(
    r"Ans\.\s*\(\d+\)|\banswer[:\s]*[a-d]\b|\bSol\.|^[ \t]*(?:solution|explanation)\s*:",
    re.IGNORECASE | re.MULTILINE,
)
_FIRST_OPTION_RE = re.compile(r"\(\d+\)\s|^[ \t]*\(?[a-d]\)\s", re.IGNORECASE | re.MULTILINE)


def is_option_line(line: str) -> bool:
    """Numbered options followed by a digit, or a lettered ``a)``/``(a)`` line."""

    return bool(_NUMBERED_OPTION_LINE_RE.search(line) or _LETTERED_OPTION_LINE_RE.match(line))


def extract_stem(block: str) -> str:
    parts: list[str] = []
    for line in block.splitlines():
        stripped = line.strip()
        if is_option_line(stripped):
            break
        if not stripped or _QUESTION_NUMBER_LINE_RE.match(stripped):
            continue
        if not parts:
            stripped = _LEADING_MARKER_RE.sub("", stripped, count=1)
            if not stripped:
                continue
        parts.append(stripped)
    return " ".join(parts).strip()


def find_answer_key(block: str) -> AnswerKey | None:
    for style, pattern in ANSWER_KEY_PATTERNS:
        match = pattern.search(block)
        if match:
            return AnswerKey(style=style, value=match.group(1).lower())
    return None


def option_region(block: str) -> str:
    """Return the block with any trailing answer key or solution cut off."""

    first_option = _FIRST_OPTION_RE.search(block)
    if first_option is None:
        return block
    end = _OPTION_REGION_END_RE.search(block, first_option.start())
    return block[: end.start()] if end else block


def inline_numbered_options(region: str) -> list[str]:
    """All ``(n) text`` groups in order, ignoring line breaks."""

    return [normalize_whitespace(match.group(2)) for match in _NUMBERED_OPTION_RE.finditer(region.strip())]


def _options_on_line(line: str) -> list[str]:
    if _NUMBERED_OPTION_LINE_RE.search(line):
        return [normalize_whitespace(m.group(2)) for m in _NUMBERED_OPTION_RE.finditer(line)]
    return [normalize_whitespace(m.group(2)) for m in _LETTERED_OPTION_RE.finditer(line)]


def line_scanned_options(region: str) -> list[str]:
    """Scan option lines; plain lines after an open option continue its text."""

    texts: list[str] = []
    in_options = False
    for line in region.splitlines():
        stripped = line.strip()
        if is_option_line(stripped):
            in_options = True
            texts.extend(_options_on_line(stripped))
        elif in_options and stripped and texts:
            texts[-1] = f"{texts[-1]} {stripped}"
    return texts


OPTION_STRATEGIES: tuple[tuple[str, Callable[[str], list[str]]], ...] = (
    ("inline-numbered", inline_numbered_options),
    ("line-scan", line_scanned_options),
)


def extract_option_texts(block: str) -> list[str]:
    region = option_region(block)
    for _, strategy in OPTION_STRATEGIES:
        texts = [text for text in strategy(region) if text]
        if len(texts) >= MIN_OPTIONS:
            return texts
    return []


def apply_answer_key(texts: list[str], answer_key: AnswerKey | None) -> tuple[ExtractedOption, ...]:
    """Mark the keyed option correct; out-of-range keys mark nothing."""

    correct_index = answer_key.option_index if answer_key is not None else -1
    return tuple(
        ExtractedOption(text=text, is_correct=index == correct_index, order=index)
        for index, text in enumerate(texts)
    )


def extract_explanation(block: str) -> str | None:
    for _, pattern in EXPLANATION_PATTERNS:
        match = pattern.search(block)
        if match:
            return match.group(1).strip() or None
    return None


def extract_fields(block: str) -> BlockFields:
    """Extract stem, options, answer key and explanation from one block.

    Raises :class:`NotAQuestion` when the stem is empty or fewer than two
    options survive both option strategies.
    """

    stem = extract_stem(block)
    if not stem:
        raise NotAQuestion("empty stem")

    texts = extract_option_texts(block)
    if len(texts) < MIN_OPTIONS:
        raise NotAQuestion(f"found {len(texts)} option(s), need at least {MIN_OPTIONS}")

    answer_key = find_answer_key(block)
    return BlockFields(
        stem=stem,
        options=apply_answer_key(texts, answer_key),
        explanation=extract_explanation(block),
        answer_key=answer_key,
    )
