"""Stem fingerprinting and duplicate detection for imports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from pyqbank.extraction.normalization import stem_fingerprint

DUPLICATE_REASON = "normalized-stem-match"


@dataclass(slots=True)
class DedupeDecision:
    is_duplicate: bool
    reason: str | None
    fingerprint: str


class StemFingerprintRegistry:
    """Tracks fingerprints seen in this batch on top of an external lookup."""

    def __init__(self, stored_lookup: Callable[[str], bool] | None = None) -> None:
        self._stored_lookup = stored_lookup
        self._batch_fingerprints: set[str] = set()

    def evaluate(self, stem: str) -> DedupeDecision:
        fingerprint = stem_fingerprint(stem)
        if fingerprint in self._batch_fingerprints or (
            self._stored_lookup is not None and self._stored_lookup(fingerprint)
        ):
            return DedupeDecision(is_duplicate=True, reason=DUPLICATE_REASON, fingerprint=fingerprint)
        return DedupeDecision(is_duplicate=False, reason=None, fingerprint=fingerprint)

    def remember(self, fingerprint: str) -> None:
        """Record a fingerprint once its question has actually been stored."""

        self._batch_fingerprints.add(fingerprint)
