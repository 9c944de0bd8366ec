"""TXT adapter with encoding detection."""

from __future__ import annotations

from pathlib import Path

from charset_normalizer import from_bytes

from pyqbank.ingestion.models import LoadedDocument

_BINARY_PREFIXES = (b"%PDF-", b"PK\x03\x04")


class TXTAdapter:
    """Read plain-text paper dumps with robust charset handling."""

    def supports(self, path: Path, sniffed_bytes: bytes | None = None) -> bool:
        if path.suffix.lower() == ".txt":
            return True
        if sniffed_bytes is None:
            return False
        if path.suffix.lower() == ".pdf":
            return False
        if sniffed_bytes.lstrip().startswith(_BINARY_PREFIXES):
            return False
        return b"\x00" not in sniffed_bytes

    def extract(self, path: Path) -> LoadedDocument:
        raw = path.read_bytes()
        text = raw.decode(self._detect_encoding(raw))
        # Normalize line endings; segmentation relies on "\n" boundaries.
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return LoadedDocument(source_path=str(path), filename=path.name, text=text, format_name="txt")

    def _detect_encoding(self, raw: bytes) -> str:
        if not raw:
            return "utf-8"
        best = from_bytes(raw).best()
        if best and best.encoding:
            return best.encoding

        for fallback in ("utf-8", "cp1252"):
            try:
                raw.decode(fallback)
                return fallback
            except UnicodeDecodeError:
                continue
        raise ValueError("Could not detect TXT encoding")
