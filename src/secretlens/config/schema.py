"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

OutputFormat = Literal["terminal", "json", "sarif"]

OUTPUT_FORMATS = ("terminal", "json", "sarif")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ScanConfig:
    check_requirements: bool = True
    min_entropy_override: Optional[float] = None  # global floor on top of per-rule thresholds
    timeout_ms: int = 1000  # budget per (rule, content) pair
    max_workers: int = 4
    keep_ignored: bool = False  # keep ignore_if_contains hits, flagged as ignored


@dataclass
class ScoringConfig:
    min_confidence: int = 60


@dataclass
class RulesConfig:
    builtin: bool = True
    paths: List[str] = field(default_factory=list)  # YAML files or directories
    enable: List[str] = field(default_factory=list)  # empty = all enabled
    disable: List[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True
    redact: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    json: bool = False


@dataclass
class SecretLensConfig:
    version: str = "1.0"
    scan: ScanConfig = field(default_factory=ScanConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
