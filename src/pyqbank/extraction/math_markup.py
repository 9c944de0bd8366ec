"""Rewrite plain-text math fragments into LaTeX-style markup.

Passes run in a fixed order and each one only matches token shapes that no
earlier pass produces, so normalizing already-normalized text is a no-op.
"""

from __future__ import annotations

import re
from typing import Callable

GREEK_LETTERS: tuple[str, ...] = (
    "alpha",
    "beta",
    "gamma",
    "delta",
    "epsilon",
    "theta",
    "lambda",
    "mu",
    "pi",
    "sigma",
    "phi",
    "omega",
)

SQUARE_ROOT_SIGN = "\u221a"

_FRACTION_RE = re.compile(r"(\d+)/(\d+)")
# Markup output puts "{" right after "^" or "_", which these never match.
_SUPERSCRIPT_RE = re.compile(r"(\w+)\^(\d+)")
_SUBSCRIPT_RE = re.compile(r"([^\W_]+)_(\d+)")
_SQUARE_ROOT_RE = re.compile(SQUARE_ROOT_SIGN + r"\(([^)]+)\)")
_GREEK_RE = re.compile(r"(?<!\\)\b(" + "|".join(GREEK_LETTERS) + r")\b", re.IGNORECASE)


def _greek(match: re.Match[str]) -> str:
    return "\\" + match.group(1).lower()


MARKUP_PASSES: tuple[tuple[str, re.Pattern[str], str | Callable[[re.Match[str]], str]], ...] = (
    ("fraction", _FRACTION_RE, r"\\frac{\1}{\2}"),
    ("superscript", _SUPERSCRIPT_RE, r"\1^{\2}"),
    ("subscript", _SUBSCRIPT_RE, r"\1_{\2}"),
    ("square-root", _SQUARE_ROOT_RE, r"\\sqrt{\1}"),
    ("greek", _GREEK_RE, _greek),
)


def normalize_math(text: str) -> str:
    for _, pattern, replacement in MARKUP_PASSES:
        text = pattern.sub(replacement, text)
    return text
