"""Question extraction core: segmentation, field extraction and validation."""

from .difficulty import estimate_difficulty
from .fields import BlockFields, NotAQuestion, extract_fields
from .math_markup import normalize_math
from .metadata import build_tag_names, infer_metadata
from .models import (
    BlockExtracted,
    BlockFailed,
    BlockOutcome,
    BlockSkipped,
    Difficulty,
    DocumentMetadata,
    ExtractedOption,
    ExtractedQuestion,
    RawBlock,
    Shift,
    Subject,
)
from .segmenter import split_into_blocks
from .validator import ValidationReport, validate_question, validate_questions

__all__ = [
    "BlockExtracted",
    "BlockFailed",
    "BlockFields",
    "BlockOutcome",
    "BlockSkipped",
    "Difficulty",
    "DocumentMetadata",
    "ExtractedOption",
    "ExtractedQuestion",
    "NotAQuestion",
    "RawBlock",
    "Shift",
    "Subject",
    "ValidationReport",
    "build_tag_names",
    "estimate_difficulty",
    "extract_fields",
    "infer_metadata",
    "normalize_math",
    "split_into_blocks",
    "validate_question",
    "validate_questions",
]
