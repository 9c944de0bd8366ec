"""Shared adapter contract for per-format text loaders."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pyqbank.ingestion.models import LoadedDocument


@runtime_checkable
class TextAdapter(Protocol):
    """Protocol that every format adapter must implement."""

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        """Return True when this adapter can read the given file."""

    def extract(self, path: Path) -> LoadedDocument:
        """Return the document's text with line breaks preserved."""
