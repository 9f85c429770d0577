"""Structural requirement checks for matched text (``pattern_requirements``)."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Optional

from secretlens.rules.models import DEFAULT_SPECIAL_CHARS, Requirements


@dataclass(frozen=True)
class RequirementVerdict:
    passed: bool
    reason: Optional[str] = None
    ignored: bool = False  # rejected because of an ignore_if_contains term


_PASS = RequirementVerdict(passed=True)


def _short(count: int, minimum: Optional[int]) -> bool:
    return minimum is not None and count < minimum


def check_requirements(text: str, requirements: Optional[Requirements]) -> RequirementVerdict:
    """Check *text* against *requirements*.

    Character-class minimums are checked first and count ASCII characters
    only. The ``ignore_if_contains`` terms are matched case-insensitively
    after trimming, and blank terms never match.
    """
    if requirements is None:
        return _PASS

    digits = sum(1 for c in text if c in string.digits)
    if _short(digits, requirements.min_digits):
        return RequirementVerdict(
            passed=False,
            reason=f"Requires at least {requirements.min_digits} digit(s), found {digits}",
        )

    upper = sum(1 for c in text if c in string.ascii_uppercase)
    if _short(upper, requirements.min_uppercase):
        return RequirementVerdict(
            passed=False,
            reason=f"Requires at least {requirements.min_uppercase} uppercase letter(s), found {upper}",
        )

    lower = sum(1 for c in text if c in string.ascii_lowercase)
    if _short(lower, requirements.min_lowercase):
        return RequirementVerdict(
            passed=False,
            reason=f"Requires at least {requirements.min_lowercase} lowercase letter(s), found {lower}",
        )

    alphabet = requirements.special_chars or DEFAULT_SPECIAL_CHARS
    special = sum(1 for c in text if c in alphabet)
    if _short(special, requirements.min_special_chars):
        return RequirementVerdict(
            passed=False,
            reason=f"Requires at least {requirements.min_special_chars} special character(s), found {special}",
        )

    lowered = text.lower()
    for term in requirements.ignore_if_contains:
        needle = term.strip().lower()
        if needle and needle in lowered:
            return RequirementVerdict(
                passed=False,
                reason=f"Contains ignored term: {term.strip()}",
                ignored=True,
            )

    return _PASS
