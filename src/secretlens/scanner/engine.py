"""Core scan engine — applies a compiled rule set to one piece of content.

Every rule is an isolated unit: an exception or timeout inside one rule
is logged and recorded on its ``UnitResult``, and the other rules still
run. Matched secret values never appear in log events or error messages.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from secretlens.findings.models import RawMatch
from secretlens.rules.models import CompiledRule
from secretlens.scanner.entropy import shannon_entropy
from secretlens.scanner.requirements import check_requirements
from secretlens.utils.logger import get_logger

logger = get_logger(__name__)

EntropyFn = Callable[[str], float]

FAILURE_TIMEOUT = "timeout"
FAILURE_ERROR = "error"


class ScanError(Exception):
    """Raised on internal scanner error (never contains secret values)."""


@dataclass(frozen=True)
class ScanOptions:
    entropy_fn: Optional[EntropyFn] = shannon_entropy
    check_requirements: bool = True
    min_entropy_override: Optional[float] = None
    timeout_s: float = 1.0  # budget per (rule, content) unit
    keep_ignored: bool = False

    @classmethod
    def from_config(cls, config) -> "ScanOptions":
        """Build options from a ``SecretLensConfig``."""
        scan_cfg = config.scan
        return cls(
            check_requirements=scan_cfg.check_requirements,
            min_entropy_override=scan_cfg.min_entropy_override,
            timeout_s=max(scan_cfg.timeout_ms, 1) / 1000.0,
            keep_ignored=scan_cfg.keep_ignored,
        )


DEFAULT_OPTIONS = ScanOptions()


@dataclass
class UnitResult:
    """Outcome of applying one rule to one piece of content."""

    rule_id: str
    matches: List[RawMatch] = field(default_factory=list)
    failure: Optional[str] = None  # FAILURE_TIMEOUT | FAILURE_ERROR
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def entropy_threshold(rule: CompiledRule, options: ScanOptions) -> Optional[float]:
    """Effective threshold: the larger of the rule's and the override, if any."""
    candidates = [t for t in (rule.min_entropy, options.min_entropy_override) if t is not None]
    return max(candidates) if candidates else None


def _evaluate(text: str, offset: int, rule: CompiledRule, options: ScanOptions) -> Optional[RawMatch]:
    """Apply entropy and requirement gates to one match; None means rejected."""
    entropy = options.entropy_fn(text) if options.entropy_fn is not None else None

    threshold = entropy_threshold(rule, options)
    if threshold is not None and entropy is not None and entropy < threshold:
        return None

    ignored = False
    if options.check_requirements and rule.requirements is not None:
        verdict = check_requirements(text, rule.requirements)
        if not verdict.passed:
            if not (verdict.ignored and options.keep_ignored):
                return None
            ignored = True

    return RawMatch(
        rule_id=rule.id,
        rule_name=rule.name,
        confidence_label=rule.confidence,
        matched_text=text,
        offset=offset,
        entropy=entropy,
        ignored=ignored,
    )


def scan_rule(content: str, rule: CompiledRule, options: ScanOptions = DEFAULT_OPTIONS) -> UnitResult:
    """Find every accepted match of *rule* in *content*.

    Matching resumes at the end of the previous match, or one character
    past it for a zero-width match. The whole unit shares one deadline;
    hitting it keeps no matches from this unit.
    """
    result = UnitResult(rule_id=rule.id)
    deadline = time.monotonic() + options.timeout_s
    pos = 0
    matches: List[RawMatch] = []

    try:
        while pos <= len(content):
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError("rule scan deadline exceeded")
            m = rule.matcher.search(content, pos, timeout=remaining)
            if m is None:
                break
            start, end = m.span()
            pos = end + 1 if end == start else end
            if end == start:
                continue
            accepted = _evaluate(m.group(0), start, rule, options)
            if accepted is not None:
                matches.append(accepted)
    except TimeoutError:
        logger.warning("rule_scan_timeout", rule_id=rule.id, timeout_s=options.timeout_s)
        result.failure = FAILURE_TIMEOUT
        result.error = "timed out"
        return result
    except Exception as exc:  # noqa: BLE001
        # exc may echo content; only its type is recorded
        logger.warning("rule_scan_failed", rule_id=rule.id, error_type=type(exc).__name__)
        result.failure = FAILURE_ERROR
        result.error = type(exc).__name__
        return result

    result.matches = matches
    return result


def scan(
    content: str,
    rules: Iterable[CompiledRule],
    options: Optional[ScanOptions] = None,
    *,
    units: Optional[List[UnitResult]] = None,
) -> List[RawMatch]:
    """Apply every rule to *content*; return accepted matches.

    *rules* may be a ``RuleSet`` or any iterable of compiled rules. Pass *units* to collect
    the per-rule ``UnitResult`` records.
    """
    opts = options or DEFAULT_OPTIONS
    if isinstance(rules, Mapping):
        rules = rules.values()
    matches: List[RawMatch] = []
    if not content:
        return matches
    for rule in rules:
        unit = scan_rule(content, rule, opts)
        if units is not None:
            units.append(unit)
        matches.extend(unit.matches)
    return matches
