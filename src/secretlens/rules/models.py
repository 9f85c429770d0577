"""Rule data models — raw foreign-dialect rules and their compiled form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Literal, Optional, Tuple

Confidence = Literal["low", "medium", "high"]

#: Characters counted by ``min_special_chars`` when a rule names no alphabet.
DEFAULT_SPECIAL_CHARS = "!@#$%^&*()_+-=[]{}|;:'\",.<>?/\\`~"


@dataclass(frozen=True)
class Requirements:
    """Structural requirements a match must meet (Kingfisher ``pattern_requirements``)."""

    min_digits: Optional[int] = None
    min_uppercase: Optional[int] = None
    min_lowercase: Optional[int] = None
    min_special_chars: Optional[int] = None
    special_chars: Optional[str] = None
    ignore_if_contains: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RawRule:
    """A detection rule as supplied by a loader.

    ``pattern`` is in the foreign dialect and may span several lines.
    """

    id: str
    name: str
    pattern: str
    min_entropy: Optional[float] = None
    requirements: Optional[Requirements] = None
    confidence: Confidence = "medium"
    description: str = ""
    examples: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CompiledRule:
    """A ``RawRule`` with its converted pattern and compiled matcher."""

    rule: RawRule
    native_pattern: str
    native_flags: FrozenSet[str]
    matcher: Any = field(repr=False, compare=False)  # regex.Pattern

    @property
    def id(self) -> str:
        return self.rule.id

    @property
    def name(self) -> str:
        return self.rule.name

    @property
    def pattern(self) -> str:
        return self.rule.pattern

    @property
    def min_entropy(self) -> Optional[float]:
        return self.rule.min_entropy

    @property
    def requirements(self) -> Optional[Requirements]:
        return self.rule.requirements

    @property
    def confidence(self) -> Confidence:
        return self.rule.confidence

    @property
    def examples(self) -> Tuple[str, ...]:
        return self.rule.examples
