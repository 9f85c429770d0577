"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from secretlens.findings.models import BatchResult
from secretlens.findings.redactor import redact


def to_dict(result: BatchResult, *, redact_values: bool = True) -> Dict[str, Any]:
    """Convert BatchResult to a JSON-serialisable dict."""
    findings_list: List[Dict[str, Any]] = []
    for f in result.findings:
        findings_list.append({
            "rule": f.rule_id,
            "rule_name": f.rule_name,
            "confidence": f.confidence_score,
            "confidence_label": f.confidence_label,
            "source": f.source_location,
            "line": f.line,
            "offset": f.offset,
            "value": redact(f.matched_text) if redact_values else f.matched_text,
            **({"entropy": round(f.entropy, 2)} if f.entropy is not None else {}),
            **({"ignored": True} if f.ignored else {}),
        })

    suppressed_list: List[Dict[str, Any]] = []
    for s in result.suppressed:
        suppressed_list.append({
            "rule": s.rule_id,
            "source": s.source_location,
            "offset": s.offset,
            "reason": s.reason,
        })

    failures_list: List[Dict[str, Any]] = []
    for u in result.failures:
        failures_list.append({
            "rule": u.rule_id,
            "source": u.source_location,
            "kind": u.kind,
            "error": u.error,
        })

    return {
        "version": "1.0",
        "items_scanned": result.items_scanned,
        "total_findings": result.total_findings,
        "cancelled": result.cancelled,
        "findings": findings_list,
        "suppressed": len(result.suppressed),
        "suppressed_details": suppressed_list,
        "failures": failures_list,
        "scan_duration_ms": result.scan_duration_ms,
    }


def render(result: BatchResult, *, redact_values: bool = True) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result, redact_values=redact_values), indent=2)
