"""Turn raw matches into scored findings.

Pipeline per match: false-positive heuristics, confidence score, dedup.
Any rejection drops the match and, when the caller passes a list,
records a ``Suppression`` for audit.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Union

from secretlens.findings.aggregator import DedupKey, deduplicate
from secretlens.findings.models import Finding, RawMatch
from secretlens.scanner.suppression import (
    REASON_DUPLICATE,
    REASON_LOW_CONFIDENCE,
    Suppression,
    context_window,
    false_positive_reason,
)

DEFAULT_MIN_CONFIDENCE = 60

_BASE_SCORES = {"high": 85, "medium": 70}
_FALLBACK_SCORE = 60
_HIGH_ENTROPY = 4.5
_LOW_ENTROPY = 3.5
_ENTROPY_ADJUST = 10


def compute_confidence(label: str, entropy: Optional[float]) -> int:
    """Base score from the rule's label, nudged by entropy, clamped to 0–100."""
    score = _BASE_SCORES.get(label, _FALLBACK_SCORE)
    if entropy is not None:
        if entropy > _HIGH_ENTROPY:
            score += _ENTROPY_ADJUST
        elif entropy < _LOW_ENTROPY:
            score -= _ENTROPY_ADJUST
    return max(0, min(100, score))


def score(
    raw_matches: Iterable[RawMatch],
    content: str,
    source_location: str,
    *,
    min_confidence: int = DEFAULT_MIN_CONFIDENCE,
    suppressed: Optional[List[Suppression]] = None,
    seen: Optional[Set[DedupKey]] = None,
) -> List[Finding]:
    """Filter, score and deduplicate *raw_matches* found in *content*.

    *seen* carries dedup keys across calls (e.g. across batch items).
    """
    if seen is None:
        seen = set()
    candidates: List[Finding] = []

    def _reject(match: Union[RawMatch, Finding], reason: str) -> None:
        if suppressed is not None:
            suppressed.append(
                Suppression(
                    rule_id=match.rule_id,
                    source_location=source_location,
                    offset=match.offset,
                    reason=reason,
                )
            )

    for match in raw_matches:
        reason = false_positive_reason(content, match.offset, match.matched_text)
        if reason is not None:
            _reject(match, reason)
            continue

        confidence = compute_confidence(match.confidence_label, match.entropy)
        if confidence < min_confidence:
            _reject(match, REASON_LOW_CONFIDENCE)
            continue

        start, end = context_window(content, match.offset, len(match.matched_text))
        finding = Finding(
            rule_id=match.rule_id,
            rule_name=match.rule_name,
            confidence_label=match.confidence_label,
            matched_text=match.matched_text,
            offset=match.offset,
            entropy=match.entropy,
            confidence_score=confidence,
            context=content[start:end],
            source_location=source_location,
            line=content.count("\n", 0, match.offset) + 1,
            ignored=match.ignored,
        )
        candidates.append(finding)

    findings, duplicates = deduplicate(candidates, seen)
    for finding in duplicates:
        _reject(finding, REASON_DUPLICATE)
    return findings
