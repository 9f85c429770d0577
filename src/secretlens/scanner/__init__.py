"""Scanner — engine, entropy, requirements, false-positive heuristics.

Batch scanning lives in ``secretlens.scanner.batch``.
"""

from secretlens.scanner.engine import ScanError, ScanOptions, UnitResult, scan, scan_rule
from secretlens.scanner.entropy import shannon_entropy
from secretlens.scanner.requirements import RequirementVerdict, check_requirements
from secretlens.scanner.suppression import Suppression

__all__ = [
    "RequirementVerdict",
    "ScanError",
    "ScanOptions",
    "Suppression",
    "UnitResult",
    "check_requirements",
    "scan",
    "scan_rule",
    "shannon_entropy",
]
