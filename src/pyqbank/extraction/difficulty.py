"""Heuristic difficulty labelling from stem text."""

from __future__ import annotations

import re

from pyqbank.extraction.models import Difficulty

HARD_MIN_LENGTH = 201
MEDIUM_MIN_LENGTH = 101

_HARD_KEYWORDS_RE = re.compile(r"derivative|integral|matrix|eigenvalue|quantum|thermodynamic", re.IGNORECASE)
_OPERATOR_RE = re.compile(r"[+\-*/=<>(){}\[\]]")


def estimate_difficulty(stem: str) -> Difficulty:
    """HARD on domain keywords or long stems, MEDIUM on operators or medium stems."""

    length = len(stem)
    if _HARD_KEYWORDS_RE.search(stem) or length >= HARD_MIN_LENGTH:
        return Difficulty.HARD
    if _OPERATOR_RE.search(stem) or length >= MEDIUM_MIN_LENGTH:
        return Difficulty.MEDIUM
    return Difficulty.EASY
