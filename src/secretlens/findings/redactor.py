"""Secret value redaction for safe output."""

from __future__ import annotations


def redact_partial(value: str) -> str:
    """Partial reveal: first 4 + last 2 chars.

    Example: ``ghp_Abc123xyz9`` → ``ghp_...z9``
    """
    if len(value) <= 6:
        return "[REDACTED]"
    return f"{value[:4]}...{value[-2:]}"


def redact_full(_value: str) -> str:
    """Full redaction — never reveal any part."""
    return "[REDACTED]"


def redact(value: str, *, full: bool = False) -> str:
    """Redact a matched secret value."""
    if full:
        return redact_full(value)
    return redact_partial(value)
