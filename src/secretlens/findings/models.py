"""Finding data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class RawMatch:
    """A single accepted match produced by the scan engine (before scoring)."""

    rule_id: str
    rule_name: str
    confidence_label: str
    matched_text: str
    offset: int
    entropy: Optional[float] = None
    ignored: bool = False  # ignore_if_contains hit kept because keep_ignored is on

    @property
    def end(self) -> int:
        return self.offset + len(self.matched_text)


@dataclass
class Finding:
    """Scored, filtered finding for output."""

    rule_id: str
    rule_name: str
    confidence_label: str
    matched_text: str
    offset: int
    entropy: Optional[float]
    confidence_score: int
    context: str
    source_location: str
    line: int = 0  # 1-based line of offset
    ignored: bool = False

    def __post_init__(self) -> None:
        self.confidence_score = max(0, min(100, self.confidence_score))

    @property
    def end(self) -> int:
        return self.offset + len(self.matched_text)


@dataclass(frozen=True)
class UnitFailure:
    """A (rule, item) unit that errored or timed out; it contributed no matches."""

    rule_id: str
    source_location: str
    kind: str  # 'timeout' | 'error'
    error: str


@dataclass
class BatchResult:
    """Complete result of a batch scan."""

    findings: List[Finding] = field(default_factory=list)
    suppressed: List["Suppression"] = field(default_factory=list)  # type: ignore[name-defined]
    failures: List[UnitFailure] = field(default_factory=list)
    items_scanned: int = 0
    cancelled: bool = False
    scan_duration_ms: float = 0.0

    @property
    def total_findings(self) -> int:
        return len(self.findings)

    @property
    def timeouts(self) -> List[UnitFailure]:
        return [f for f in self.failures if f.kind == "timeout"]
