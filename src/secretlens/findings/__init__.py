"""Finding models, scoring, aggregation, and redaction."""

from secretlens.findings.aggregator import deduplicate, normalize_source_location
from secretlens.findings.models import BatchResult, Finding, RawMatch, UnitFailure
from secretlens.findings.redactor import redact
from secretlens.findings.scoring import compute_confidence, score

__all__ = [
    "BatchResult",
    "Finding",
    "RawMatch",
    "UnitFailure",
    "compute_confidence",
    "deduplicate",
    "normalize_source_location",
    "redact",
    "score",
]
