"""Static paren-balance check for converted patterns.

Advisory only: ``regex.compile`` has the final word. A pattern this check
rejects may still compile, in which case the compiler keeps it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from secretlens.dialect.cursor import CHAR, PatternCursor


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    position: Optional[int] = None
    depth: int = 0


def validate(pattern: str) -> ValidationResult:
    """Check that grouping parens outside character classes balance."""
    open_positions: List[int] = []
    for tok in PatternCursor(pattern):
        if tok.kind != CHAR:
            continue
        if tok.char == "(":
            open_positions.append(tok.index)
        elif tok.char == ")":
            if not open_positions:
                return ValidationResult(
                    valid=False,
                    error=f"Unmatched closing parenthesis at position {tok.index}",
                    position=tok.index,
                )
            open_positions.pop()

    if open_positions:
        depth = len(open_positions)
        first = open_positions[0]
        return ValidationResult(
            valid=False,
            error=f"Unmatched opening parenthesis (depth: {depth}) at position {first}",
            position=first,
            depth=depth,
        )
    return ValidationResult(valid=True)
