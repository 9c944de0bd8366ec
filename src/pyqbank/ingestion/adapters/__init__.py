"""Text adapter implementations and contracts."""

from .base import TextAdapter
from .pdf_adapter import PDFAdapter
from .txt_adapter import TXTAdapter


def build_default_adapters() -> dict[str, TextAdapter]:
    """Return the default format adapter map."""

    return {"pdf": PDFAdapter(), "txt": TXTAdapter()}


__all__ = ["PDFAdapter", "TXTAdapter", "TextAdapter", "build_default_adapters"]
