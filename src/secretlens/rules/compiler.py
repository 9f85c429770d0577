"""Rule compiler — convert, validate and compile raw rules into a RuleSet.

Per rule:
  1. detect free-spacing mode from the flag header
  2. strip comments
  3. translate to native syntax and flags
  4. validate paren balance (informational)
  5. ``regex.compile`` — the only verdict that decides inclusion

A rule that fails to compile is left out and recorded as a
``CompileDiagnostic``; the remaining rules still compile.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

import regex

from secretlens.dialect.converter import has_extended_flag, strip_comments, translate
from secretlens.dialect.validator import validate
from secretlens.rules.models import CompiledRule, RawRule
from secretlens.utils.logger import get_logger

logger = get_logger(__name__)

_ORIGINAL_PREVIEW = 150
_CONVERTED_PREVIEW = 200
_EXAMPLE_TIMEOUT_S = 1.0

_FLAG_BITS = {
    "i": regex.IGNORECASE,
    "m": regex.MULTILINE,
    "s": regex.DOTALL,
}


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def native_flag_bits(flags: Iterable[str]) -> int:
    """Map native flag letters to ``regex`` flag bits (``g`` has no bit)."""
    bits = 0
    for letter in flags:
        bits |= _FLAG_BITS.get(letter, 0)
    return bits


@dataclass(frozen=True)
class CompileDiagnostic:
    """Record of a rule that failed to compile, or compiled against the validator."""

    rule_id: str
    error: str
    original: str
    converted: str
    accepted: bool = False  # True: compiled although the validator objected


class RuleSet(Mapping):
    """Immutable mapping of rule id → CompiledRule; only successful compiles."""

    def __init__(
        self,
        rules: Dict[str, CompiledRule],
        diagnostics: Tuple[CompileDiagnostic, ...] = (),
    ) -> None:
        self._rules = dict(rules)
        self.diagnostics = diagnostics

    def __getitem__(self, rule_id: str) -> CompiledRule:
        return self._rules[rule_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({len(self._rules)} rules, {len(self.failures)} failed)"

    @property
    def failures(self) -> List[CompileDiagnostic]:
        return [d for d in self.diagnostics if not d.accepted]


def compile_rule(raw: RawRule) -> Tuple[Optional[CompiledRule], Optional[CompileDiagnostic]]:
    """Compile one rule. Returns ``(compiled, diagnostic)``; either may be None."""
    if not raw.pattern:
        return None, CompileDiagnostic(
            rule_id=raw.id, error="Rule has no pattern", original="", converted=""
        )

    converted_text = raw.pattern
    try:
        extended = has_extended_flag(raw.pattern)
        cleaned = strip_comments(raw.pattern, extended)
        converted = translate(cleaned)
        converted_text = converted.native_pattern
        verdict = validate(converted.native_pattern)
        matcher = regex.compile(
            converted.native_pattern, native_flag_bits(converted.native_flags)
        )
    except Exception as exc:  # noqa: BLE001
        diag = CompileDiagnostic(
            rule_id=raw.id,
            error=f"{type(exc).__name__}: {exc}",
            original=_truncate(raw.pattern, _ORIGINAL_PREVIEW),
            converted=_truncate(converted_text, _CONVERTED_PREVIEW),
        )
        logger.warning(
            "rule_compile_failed",
            rule_id=raw.id,
            error=diag.error,
            original=diag.original,
            converted=diag.converted,
        )
        return None, diag

    compiled = CompiledRule(
        rule=raw,
        native_pattern=converted.native_pattern,
        native_flags=converted.native_flags,
        matcher=matcher,
    )
    if not verdict.valid:
        logger.debug(
            "validator_disagreed",
            rule_id=raw.id,
            validator_error=verdict.error,
        )
        return compiled, CompileDiagnostic(
            rule_id=raw.id,
            error=verdict.error or "validator rejected pattern",
            original=_truncate(raw.pattern, _ORIGINAL_PREVIEW),
            converted=_truncate(converted.native_pattern, _CONVERTED_PREVIEW),
            accepted=True,
        )
    return compiled, None


def compile_all(raw_rules: Iterable[RawRule]) -> RuleSet:
    """Compile every rule; failures are recorded and skipped."""
    compiled: Dict[str, CompiledRule] = {}
    diagnostics: List[CompileDiagnostic] = []

    for raw in raw_rules:
        rule, diag = compile_rule(raw)
        if diag is not None:
            diagnostics.append(diag)
        if rule is None:
            continue
        if rule.id in compiled:
            logger.info("rule_replaced", rule_id=rule.id)
        compiled[rule.id] = rule

    logger.debug(
        "rule_set_compiled",
        compiled=len(compiled),
        failed=sum(1 for d in diagnostics if not d.accepted),
    )
    return RuleSet(compiled, tuple(diagnostics))


def check_examples(rule_set: RuleSet) -> Dict[str, List[str]]:
    """Run each rule against its own examples.

    Returns rule id → examples the rule does not match (rules with no
    misses are omitted).
    """
    misses: Dict[str, List[str]] = {}
    for rule_id, rule in rule_set.items():
        failed = [ex for ex in rule.examples if not _matches_example(rule, ex)]
        if failed:
            misses[rule_id] = failed
    return misses


def _matches_example(rule: CompiledRule, example: str) -> bool:
    try:
        return rule.matcher.search(example, timeout=_EXAMPLE_TIMEOUT_S) is not None
    except TimeoutError:
        return False


def flag_string(flags: FrozenSet[str]) -> str:
    """Render native flags in a stable order, e.g. ``gi``."""
    return "".join(sorted(flags, key="gims".find))
