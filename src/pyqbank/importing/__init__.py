"""Import/dedup stage for extracted question records."""

from .dedupe import DedupeDecision, StemFingerprintRegistry
from .importer import DUPLICATE_ERROR, ImportFailure, ImportResult, QuestionImporter, QuestionStore
from .records import read_question_records

__all__ = [
    "DUPLICATE_ERROR",
    "DedupeDecision",
    "ImportFailure",
    "ImportResult",
    "QuestionImporter",
    "QuestionStore",
    "StemFingerprintRegistry",
    "read_question_records",
]
