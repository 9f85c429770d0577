"""Load and merge configuration from .secretlens.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from secretlens.config.schema import (
    LOG_LEVELS,
    OUTPUT_FORMATS,
    LoggingConfig,
    OutputConfig,
    RulesConfig,
    ScanConfig,
    ScoringConfig,
    SecretLensConfig,
)

CONFIG_FILENAME = ".secretlens.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    try:
        return cls(**filtered)
    except TypeError as exc:
        raise ConfigError(f"Invalid [{section}] section: {exc}") from exc


def _merge_env_overrides(cfg: SecretLensConfig) -> None:
    """Apply SECRETLENS_* environment variable overrides; bad values are ignored."""
    if val := os.environ.get("SECRETLENS_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("SECRETLENS_LOG_LEVEL"):
        if val.upper() in LOG_LEVELS:
            cfg.logging.level = val.upper()
    if val := os.environ.get("SECRETLENS_TIMEOUT_MS"):
        try:
            cfg.scan.timeout_ms = int(val)
        except ValueError:
            pass
    if val := os.environ.get("SECRETLENS_MAX_WORKERS"):
        try:
            cfg.scan.max_workers = max(1, int(val))
        except ValueError:
            pass
    if val := os.environ.get("SECRETLENS_MIN_ENTROPY"):
        try:
            cfg.scan.min_entropy_override = float(val)
        except ValueError:
            pass
    if val := os.environ.get("SECRETLENS_DISABLE_RULES"):
        cfg.rules.disable.extend(r.strip() for r in val.split(",") if r.strip())


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> SecretLensConfig:
    """Load, validate, and return a SecretLensConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = SecretLensConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = SecretLensConfig(
            version=str(raw.get("version", "1.0")),
            scan=_build_section(raw, ScanConfig, "scan"),
            scoring=_build_section(raw, ScoringConfig, "scoring"),
            rules=_build_section(raw, RulesConfig, "rules"),
            output=_build_section(raw, OutputConfig, "output"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )
        if cfg.output.format not in OUTPUT_FORMATS:
            raise ConfigError(f"Unknown output format: {cfg.output.format}")

    _merge_env_overrides(cfg)
    return cfg
