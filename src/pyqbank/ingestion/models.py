"""Canonical output of the document-to-text collaborator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class LoadedDocument:
    """Raw UTF-8 text of one paper plus the filename used for provenance."""

    source_path: str
    filename: str
    text: str
    format_name: str
