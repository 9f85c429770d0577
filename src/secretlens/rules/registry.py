"""Rule registry and the process-wide rule-set cache.

``RuleRegistry`` collects raw rules (built-in plus YAML files) and applies the
enable/disable lists from config. ``RuleSetCache`` turns a loader into a
compiled ``RuleSet`` exactly once and keeps it until ``invalidate()`` is
called; nothing refreshes it implicitly.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from secretlens.config.schema import SecretLensConfig
from secretlens.rules.compiler import RuleSet, compile_all
from secretlens.rules.loader import load_rules
from secretlens.rules.models import RawRule
from secretlens.utils.logger import get_logger

logger = get_logger(__name__)

RuleLoader = Callable[[], Sequence[RawRule]]


class RuleRegistry:
    """Central store for raw detection rules."""

    def __init__(self) -> None:
        self._rules: Dict[str, RawRule] = {}
        self._disabled: set[str] = set()

    # ---- registration ----

    def register(self, rule: RawRule) -> None:
        self._rules[rule.id] = rule

    def register_many(self, rules: Sequence[RawRule]) -> None:
        for r in rules:
            self.register(r)

    # ---- queries ----

    @property
    def all_rules(self) -> List[RawRule]:
        return list(self._rules.values())

    def get(self, rule_id: str) -> Optional[RawRule]:
        return self._rules.get(rule_id)

    def enabled_rules(self) -> List[RawRule]:
        return [r for r in self._rules.values() if r.id not in self._disabled]

    # ---- config filtering ----

    def apply_config(self, config: SecretLensConfig) -> None:
        """Enable / disable rules based on ``config.rules``."""
        enable_list = config.rules.enable
        disable_list = config.rules.disable

        self._disabled = set()
        for rule_id in self._rules:
            # If an explicit enable-list exists, only those are enabled
            if enable_list and rule_id not in enable_list:
                self._disabled.add(rule_id)
            # Disable list always takes precedence
            if rule_id in disable_list:
                self._disabled.add(rule_id)

    # ---- custom rule loading ----

    def load_custom_rules(self, path: Path) -> int:
        """Load YAML rule files from a file or directory. Returns count loaded."""
        rules = load_rules(path)
        self.register_many(rules)
        return len(rules)


def build_registry(
    config: SecretLensConfig,
    root: Path,
    extra_paths: Sequence[str] = (),
) -> RuleRegistry:
    """Create a populated, config-filtered registry.

    Rule paths from config are resolved against *root*. Raises
    ``RuleLoadError`` for a missing or malformed rules file.
    """
    from secretlens.rules.builtin import ALL_BUILTIN_RULES

    registry = RuleRegistry()
    if config.rules.builtin:
        registry.register_many(ALL_BUILTIN_RULES)

    for raw_path in [*config.rules.paths, *extra_paths]:
        path = Path(raw_path)
        if not path.is_absolute():
            path = root / path
        count = registry.load_custom_rules(path)
        logger.debug("custom_rules_loaded", path=str(path), count=count)

    registry.apply_config(config)
    return registry


class RuleSetCache:
    """Build-once holder for a compiled RuleSet.

    Lifecycle: the first ``get()`` calls the loader and compiles; later calls
    return the same RuleSet. ``invalidate()`` forgets it so the next ``get()``
    rebuilds. Safe to share between threads.
    """

    def __init__(self, loader: RuleLoader) -> None:
        self._loader = loader
        self._rule_set: Optional[RuleSet] = None
        self._lock = threading.Lock()
        self.builds = 0

    @classmethod
    def from_registry(cls, registry: RuleRegistry) -> "RuleSetCache":
        return cls(registry.enabled_rules)

    @property
    def is_built(self) -> bool:
        return self._rule_set is not None

    def get(self) -> RuleSet:
        rule_set = self._rule_set
        if rule_set is not None:
            return rule_set
        with self._lock:
            if self._rule_set is None:
                self._rule_set = compile_all(self._loader())
                self.builds += 1
                logger.info(
                    "rule_set_built",
                    rules=len(self._rule_set),
                    failed=len(self._rule_set.failures),
                )
            return self._rule_set

    def invalidate(self) -> None:
        with self._lock:
            self._rule_set = None
