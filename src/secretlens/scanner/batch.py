"""Concurrent batch scanning over many (content, source_location) items.

Each item is scanned on a worker thread with the full rule set, one
(rule, item) unit at a time. Setting the ``cancel`` event stops new units
from starting; whatever was gathered is still scored and returned.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from secretlens.findings.aggregator import DedupKey, deduplicate
from secretlens.findings.models import BatchResult, Finding, UnitFailure
from secretlens.findings.scoring import DEFAULT_MIN_CONFIDENCE, score
from secretlens.rules.compiler import RuleSet
from secretlens.scanner.engine import (
    DEFAULT_OPTIONS,
    FAILURE_ERROR,
    ScanError,
    ScanOptions,
    scan_rule,
)
from secretlens.scanner.suppression import REASON_DUPLICATE, Suppression
from secretlens.utils.logger import get_logger

logger = get_logger(__name__)

ScanItem = Tuple[str, str]  # (content, source_location)
ALL_RULES = "*"  # rule id on a failure that covers a whole item


@dataclass
class _ItemOutcome:
    source_location: str
    findings: List[Finding] = field(default_factory=list)
    suppressed: List[Suppression] = field(default_factory=list)
    failures: List[UnitFailure] = field(default_factory=list)
    complete: bool = False


def _scan_item(
    item: ScanItem,
    rule_set: RuleSet,
    options: ScanOptions,
    min_confidence: int,
    cancel: threading.Event,
) -> _ItemOutcome:
    content, source_location = item
    outcome = _ItemOutcome(source_location=source_location)
    raw_matches = []

    for rule in rule_set.values():
        if cancel.is_set():
            break
        if not content:
            continue
        unit = scan_rule(content, rule, options)
        if unit.failure is not None:
            outcome.failures.append(
                UnitFailure(
                    rule_id=unit.rule_id,
                    source_location=source_location,
                    kind=unit.failure,
                    error=unit.error or "",
                )
            )
        raw_matches.extend(unit.matches)
    else:
        outcome.complete = True

    outcome.findings = score(
        raw_matches,
        content,
        source_location,
        min_confidence=min_confidence,
        suppressed=outcome.suppressed,
    )
    return outcome


def scan_batch(
    items: Iterable[ScanItem],
    rule_set: RuleSet,
    options: Optional[ScanOptions] = None,
    *,
    max_workers: int = 4,
    min_confidence: int = DEFAULT_MIN_CONFIDENCE,
    cancel: Optional[threading.Event] = None,
) -> BatchResult:
    """Scan every item with every rule in *rule_set*; return a BatchResult.

    An exception while scanning one item is recorded as a ``UnitFailure``
    for that item (rule id ``"*"``); the other items are unaffected.
    Findings are deduplicated across items on (rule id, matched text,
    normalised source location).
    """
    start = time.perf_counter()
    opts = options or DEFAULT_OPTIONS
    cancel = cancel or threading.Event()
    result = BatchResult()
    outcomes: List[_ItemOutcome] = []

    try:
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            futures: List[Tuple[str, Future]] = [
                (item[1], executor.submit(_scan_item, item, rule_set, opts, min_confidence, cancel))
                for item in items
            ]
            for source_location, future in futures:
                try:
                    outcomes.append(future.result())
                except Exception as exc:  # noqa: BLE001
                    # exc may echo content; only its type is recorded
                    logger.warning(
                        "item_scan_failed",
                        source_location=source_location,
                        error_type=type(exc).__name__,
                    )
                    result.failures.append(
                        UnitFailure(
                            rule_id=ALL_RULES,
                            source_location=source_location,
                            kind=FAILURE_ERROR,
                            error=type(exc).__name__,
                        )
                    )
    except RuntimeError as exc:
        # executor refused work (shut down mid-batch)
        cancel.set()
        raise ScanError(
            f"Internal scanner error ({type(exc).__name__}). "
            "Secrets have been scrubbed from this error."
        ) from None

    seen: Set[DedupKey] = set()
    for outcome in outcomes:
        if outcome.complete:
            result.items_scanned += 1
        result.failures.extend(outcome.failures)
        result.suppressed.extend(outcome.suppressed)
        kept, duplicates = deduplicate(outcome.findings, seen)
        result.findings.extend(kept)
        result.suppressed.extend(
            Suppression(
                rule_id=finding.rule_id,
                source_location=finding.source_location,
                offset=finding.offset,
                reason=REASON_DUPLICATE,
            )
            for finding in duplicates
        )

    result.cancelled = cancel.is_set() and any(not o.complete for o in outcomes)
    if result.cancelled:
        logger.info(
            "batch_cancelled",
            items_scanned=result.items_scanned,
            items_total=len(outcomes),
            findings=len(result.findings),
        )

    result.scan_duration_ms = round((time.perf_counter() - start) * 1000, 2)
    return result
