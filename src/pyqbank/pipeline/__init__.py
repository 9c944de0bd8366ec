"""Document extraction orchestration."""

from .folder import FolderResult, process_file, process_folder
from .orchestrator import DocumentExtraction, ExtractionOrchestrator

__all__ = [
    "DocumentExtraction",
    "ExtractionOrchestrator",
    "FolderResult",
    "process_file",
    "process_folder",
]
