"""Document-to-text loading for exam papers."""

from .loader import DocumentLoadError, DocumentLoader
from .models import LoadedDocument

__all__ = ["DocumentLoadError", "DocumentLoader", "LoadedDocument"]
