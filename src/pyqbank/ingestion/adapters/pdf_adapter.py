"""PDF adapter producing page-ordered plain text."""

from __future__ import annotations

import logging
from pathlib import Path

import pymupdf

from pyqbank.ingestion.models import LoadedDocument

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF-"


class PDFAdapter:
    """Extract embedded text page by page; scanned pages yield no text."""

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() == ".pdf":
            return True
        if sniffed_bytes is None:
            return False
        return sniffed_bytes.startswith(_PDF_MAGIC)

    def extract(self, path: Path) -> LoadedDocument:
        pages: list[str] = []
        with pymupdf.open(path) as doc:
            for page_index, page in enumerate(doc, start=1):
                page_text = page.get_text("text")
                if not page_text.strip():
                    logger.warning("No embedded text on page %d of %s", page_index, path.name)
                    continue
                pages.append(page_text)

        return LoadedDocument(
            source_path=str(path),
            filename=path.name,
            text="\n".join(pages),
            format_name="pdf",
        )
