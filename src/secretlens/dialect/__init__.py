"""Dialect — foreign regex syntax conversion and validation."""

from secretlens.dialect.converter import (
    ConvertedPattern,
    convert,
    has_extended_flag,
    strip_comments,
    translate,
)
from secretlens.dialect.cursor import PatternCursor, find_group_end
from secretlens.dialect.validator import ValidationResult, validate

__all__ = [
    "ConvertedPattern",
    "PatternCursor",
    "ValidationResult",
    "convert",
    "find_group_end",
    "has_extended_flag",
    "strip_comments",
    "translate",
    "validate",
]
