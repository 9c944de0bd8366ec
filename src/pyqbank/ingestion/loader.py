"""Routing entrypoint for text adapters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pyqbank.ingestion.adapters.base import TextAdapter
from pyqbank.ingestion.models import LoadedDocument


@dataclass(slots=True)
class DocumentLoadError(Exception):
    """Domain error for unreadable or unsupported source documents."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


class DocumentLoader:
    """Resolve the right adapter and return the document's raw text."""

    def __init__(self, sniff_bytes: int = 4096) -> None:
        self._sniff_bytes = sniff_bytes
        self._adapter_map: dict[str, TextAdapter] = {}

    def register_adapter(self, name: str, adapter: TextAdapter) -> None:
        if not name:
            raise ValueError("Adapter name cannot be empty")
        self._adapter_map[name] = adapter

    def supports(self, path: str | Path) -> bool:
        source = Path(path)
        return any(adapter.supports(source) for adapter in self._adapter_map.values())

    def load(self, path: str | Path) -> LoadedDocument:
        source = Path(path)
        sniffed = self._read_prefix(source)

        for adapter in self._adapter_map.values():
            if adapter.supports(source, sniffed):
                try:
                    loaded = adapter.extract(source)
                except Exception as exc:
                    raise DocumentLoadError(source, f"Text extraction failed: {exc}") from exc

                if not isinstance(loaded, LoadedDocument):
                    raise DocumentLoadError(source, "Adapter returned non-canonical output")
                return loaded

        raise DocumentLoadError(source, "No adapter registered for file content")

    def _read_prefix(self, path: Path) -> bytes:
        try:
            with path.open("rb") as handle:
                return handle.read(self._sniff_bytes)
        except OSError as exc:
            raise DocumentLoadError(path, f"Failed to read source file: {exc}") from exc
