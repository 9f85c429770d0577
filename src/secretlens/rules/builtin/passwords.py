"""Hardcoded password detection."""

from secretlens.rules.models import RawRule, Requirements

HARDCODED_PASSWORD = RawRule(
    id="secretlens.password.1",
    name="Hardcoded Password",
    description="Password-like names assigned a quoted literal.",
    pattern=r'''(?xi)
        (?:password|passwd|pwd)   # variable name
        \s* [:=] \s*
        ["'] (?P<value>[^"'\s]{8,64}) ["']
    ''',
    min_entropy=3.0,
    confidence="medium",
    requirements=Requirements(
        min_digits=1,
        min_lowercase=1,
        ignore_if_contains=("example", "changeme", "placeholder", "${"),
    ),
    examples=('password = "Tr0ub4dor&3x"',),
)

ALL_PASSWORD_RULES = [HARDCODED_PASSWORD]
