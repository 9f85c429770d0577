"""SARIF v2.1.0 reporter — GitHub Advanced Security / Code Scanning.

All matched values are ALWAYS redacted in SARIF output; this cannot be
disabled.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from secretlens import __version__
from secretlens.findings.models import BatchResult

_SCHEMA_URI = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json"


def _level(score: int) -> str:
    if score >= 85:
        return "error"
    if score >= 70:
        return "warning"
    return "note"


def _security_severity(score: int) -> str:
    """Map a 0–100 confidence score to SARIF security-severity (0.0 – 10.0)."""
    return f"{score / 10:.1f}"


def to_dict(result: BatchResult) -> Dict[str, Any]:
    """Convert BatchResult to a SARIF v2.1.0 dict."""
    rules: List[Dict[str, Any]] = []
    seen_rules: set[str] = set()
    results: List[Dict[str, Any]] = []

    for f in result.findings:
        # Rule definition (only once per rule_id)
        if f.rule_id not in seen_rules:
            seen_rules.add(f.rule_id)
            rules.append({
                "id": f.rule_id,
                "name": f.rule_name,
                "shortDescription": {"text": f.rule_name},
                "defaultConfiguration": {"level": _level(f.confidence_score)},
                "properties": {
                    "security-severity": _security_severity(f.confidence_score),
                },
            })

        # Result entry — ALWAYS redacted
        results.append({
            "ruleId": f.rule_id,
            "level": _level(f.confidence_score),
            "message": {
                "text": f"{f.rule_name} detected [REDACTED]",
            },
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": f.source_location},
                        "region": {
                            "startLine": max(f.line, 1),
                            "snippet": {"text": "[REDACTED]"},
                        },
                    }
                }
            ],
            "properties": {"confidence": f.confidence_score},
        })

    return {
        "$schema": _SCHEMA_URI,
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "secretlens",
                        "version": __version__,
                        "rules": rules,
                    }
                },
                "results": results,
            }
        ],
    }


def render(result: BatchResult) -> str:
    """Return SARIF JSON string."""
    return json.dumps(to_dict(result), indent=2)
