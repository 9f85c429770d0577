"""Configuration loading, schema, and defaults."""

from secretlens.config.loader import ConfigError, load_config
from secretlens.config.schema import SecretLensConfig

__all__ = [
    "ConfigError",
    "SecretLensConfig",
    "load_config",
]
