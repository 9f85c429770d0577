"""Finding deduplication across matches and scanned items."""

from __future__ import annotations

from typing import Iterable, List, Set, Tuple
from urllib.parse import urlsplit

from secretlens.findings.models import Finding

DedupKey = Tuple[str, str, str]


def normalize_source_location(location: str) -> str:
    """Drop query string and fragment so refetches of one file collapse.

    URLs keep ``scheme://host/path``; anything else is cut at the first
    ``?`` and then the first ``#``.
    """
    if not location:
        return location
    parts = urlsplit(location)
    if parts.scheme and parts.netloc:
        return f"{parts.scheme}://{parts.netloc}{parts.path}"
    return location.split("?", 1)[0].split("#", 1)[0]


def dedup_key(finding: Finding) -> DedupKey:
    return (
        finding.rule_id,
        finding.matched_text,
        normalize_source_location(finding.source_location),
    )


def deduplicate(
    findings: Iterable[Finding],
    seen: Set[DedupKey] | None = None,
) -> Tuple[List[Finding], List[Finding]]:
    """Keep the first finding per (rule_id, matched_text, location) key.

    Returns ``(kept, duplicates)``. Pass *seen* to share keys across calls.
    """
    if seen is None:
        seen = set()
    kept: List[Finding] = []
    duplicates: List[Finding] = []
    for finding in findings:
        key = dedup_key(finding)
        if key in seen:
            duplicates.append(finding)
            continue
        seen.add(key)
        kept.append(finding)
    return kept, duplicates
