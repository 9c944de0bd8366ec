"""Split raw paper text into per-question candidate blocks.

Numbering patterns are tried in priority order and the first one that
matches anywhere in the text drives the split; patterns are never combined.
When no pattern yields a block the text is split on blank lines instead.
"""

from __future__ import annotations

import re

MAX_BLOCKS = 50
MIN_CANDIDATE_CHARS = 100
MIN_BLOCK_CHARS = 50

# (name, pattern) pairs in priority order.
NUMBERING_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("q-dot", re.compile(r"Q\.?\s*\d+\.", re.IGNORECASE)),
    ("question-word", re.compile(r"Question\s*\d+\.", re.IGNORECASE)),
    ("number-capital", re.compile(r"\d+\.\s*[A-Z]")),
    ("number-let", re.compile(r"\d+\.\s*Let")),
)

_NEXT_QUESTION_RE = re.compile(r"\d+\.\s+[A-Z]")
_ANSWER_KEY_RE = re.compile(r"Ans\.\s*\((\d+)\)", re.IGNORECASE)
_SOLUTION_MARKER = "Sol."
_BLANK_LINE_RE = re.compile(r"\n\s*\n")


def select_numbering_pattern(text: str) -> tuple[str, re.Pattern[str]] | None:
    """Return the highest-priority numbering pattern present in *text*."""

    for name, pattern in NUMBERING_PATTERNS:
        if pattern.search(text):
            return name, pattern
    return None


def _shrink_block(segment: str, marker_end: int) -> str:
    block = segment

    # Two adjacent questions the numbering pattern failed to separate.
    next_question = _NEXT_QUESTION_RE.search(block, marker_end)
    if next_question:
        block = block[: next_question.start()].rstrip()

    answer = _ANSWER_KEY_RE.search(block)
    if answer:
        solution_start = block.find(_SOLUTION_MARKER, answer.start())
        if solution_start != -1:
            block = block[:solution_start].rstrip()

    return block


def split_by_pattern(text: str, pattern: re.Pattern[str]) -> list[str]:
    """Cut *text* before every match of *pattern*; the preamble is dropped."""

    matches = list(pattern.finditer(text))
    blocks: list[str] = []

    for position, match in enumerate(matches):
        end = matches[position + 1].start() if position + 1 < len(matches) else len(text)
        segment = text[match.start() : end].strip()
        if len(segment) <= MIN_CANDIDATE_CHARS:
            continue

        block = _shrink_block(segment, marker_end=match.end() - match.start())
        if len(block) > MIN_BLOCK_CHARS:
            blocks.append(block)

    return blocks


def split_by_blank_lines(text: str) -> list[str]:
    return [part.strip() for part in _BLANK_LINE_RE.split(text) if len(part.strip()) > MIN_BLOCK_CHARS]


def split_into_blocks(text: str, *, max_blocks: int = MAX_BLOCKS) -> list[str]:
    """Return at most *max_blocks* candidate question blocks in source order."""

    blocks: list[str] = []
    selected = select_numbering_pattern(text)
    if selected is not None:
        _, pattern = selected
        blocks = split_by_pattern(text, pattern)

    if not blocks:
        blocks = split_by_blank_lines(text)

    return blocks[:max_blocks]
