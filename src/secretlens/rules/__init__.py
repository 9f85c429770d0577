"""Rule engine — models, loading, compiling, registry and cache."""

from secretlens.rules.compiler import CompileDiagnostic, RuleSet, compile_all
from secretlens.rules.loader import RuleLoadError, load_rules
from secretlens.rules.models import CompiledRule, RawRule, Requirements
from secretlens.rules.registry import RuleRegistry, RuleSetCache, build_registry

__all__ = [
    "CompileDiagnostic",
    "CompiledRule",
    "RawRule",
    "Requirements",
    "RuleLoadError",
    "RuleRegistry",
    "RuleSet",
    "RuleSetCache",
    "build_registry",
    "compile_all",
    "load_rules",
]
