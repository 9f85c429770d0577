"""Built-in rules — written in the foreign dialect, compiled like any loaded rule."""

from secretlens.rules.builtin.aws import ALL_AWS_RULES
from secretlens.rules.builtin.keys import ALL_KEY_RULES
from secretlens.rules.builtin.passwords import ALL_PASSWORD_RULES
from secretlens.rules.builtin.tokens import ALL_TOKEN_RULES
from secretlens.rules.models import RawRule

ALL_BUILTIN_RULES: list[RawRule] = [
    *ALL_AWS_RULES,
    *ALL_TOKEN_RULES,
    *ALL_KEY_RULES,
    *ALL_PASSWORD_RULES,
]

__all__ = ["ALL_BUILTIN_RULES"]
