"""False-positive heuristics for accepted matches.

Each check answers one question about a match and its surroundings:

  - ``is_benign_shape``   the matched text looks like a hash, identifier or
                          bundler artefact rather than a credential.
  - ``has_asset_context`` the ±100-char window around the match is embedded
                          asset data, a source map or an import.
  - ``is_likely_base64``  the match is encoded payload, not a secret.
  - ``is_comment_line``   the line holding the match is a comment.

Rejected matches are recorded as ``Suppression`` audit entries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

CONTEXT_RADIUS = 100

REASON_BENIGN_SHAPE = "benign_shape"
REASON_ASSET_CONTEXT = "asset_context"
REASON_BASE64_DATA = "base64_data"
REASON_COMMENT_LINE = "comment_line"
REASON_LOW_CONFIDENCE = "low_confidence"
REASON_DUPLICATE = "duplicate"

BENIGN_SHAPE_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^[a-f0-9]{40}$", re.IGNORECASE),  # commit / chunk hashes
    # identifier shapes are letters-only; mixed alphanumeric tokens are not identifiers
    re.compile(r"^[A-Z][a-z]+(?:[A-Z][a-z]+)+\d*$"),  # PascalCase
    re.compile(r"^[a-z]+(?:[A-Z][a-z]+)+\d*$"),  # camelCase
    re.compile(r"^(?:map|filter|reduce|forEach|slice|splice|concat)", re.IGNORECASE),
    re.compile(r"^(?:_react|_emotion|_styled|_next)", re.IGNORECASE),
    re.compile(r"sourceMappingURL", re.IGNORECASE),
    re.compile(r"^__webpack", re.IGNORECASE),
    re.compile(r"^module\.", re.IGNORECASE),
    re.compile(r"^exports\.", re.IGNORECASE),
]

ASSET_CONTEXT_PATTERNS: List[Pattern[str]] = [
    re.compile(r"base64,", re.IGNORECASE),
    re.compile(r"data:image", re.IGNORECASE),
    re.compile(r";base64", re.IGNORECASE),
    re.compile(
        r'"(?:publicKey|privateKey|data|content|image|icon|font|logo|avatar'
        r'|thumbnail|media|src|href)":',
        re.IGNORECASE,
    ),
    re.compile(r"iVBOR|AAAA|/png|/jpeg|/jpg|/gif|/webp|/svg", re.IGNORECASE),
    re.compile(r"sourceMappingURL=", re.IGNORECASE),
    re.compile(r"webpack://", re.IGNORECASE),
    re.compile(r"__webpack", re.IGNORECASE),
    re.compile(r"\.chunk\.js", re.IGNORECASE),
    re.compile(r"/\*#\s*source", re.IGNORECASE),
    re.compile(r"""import\s+.*\s+from\s+['"]""", re.IGNORECASE),
    re.compile(r"""require\s*\(['"]""", re.IGNORECASE),
    re.compile(r"""["']data["']\s*:""", re.IGNORECASE),
    re.compile(r"""["']image["']\s*:""", re.IGNORECASE),
    re.compile(r"// data:image", re.IGNORECASE),
]

_DATA_URI_RE = re.compile(r"data:[\w/-]+;base64,")
_PADDED_RE = re.compile(r"={1,2}$")
_BASE64_ALPHABET_RE = re.compile(r"^[A-Za-z0-9+/=]+$")
_DATA_KEY_VALUE_RE = re.compile(
    r'"(?:data|content|image|icon|font|media|src|href|asset|resource)"\s*:\s*"[^"]*$',
    re.IGNORECASE,
)
_DATA_ASSIGNMENT_RE = re.compile(
    r"""(?:const|let|var)\s+(?:data|image|icon|font|asset|resource|content)\w*\s*=\s*["`'][^"`']*$""",
    re.IGNORECASE,
)
_COMMENT_PREFIXES = ("//", "*", "/*")


@dataclass(frozen=True)
class Suppression:
    """Audit record of a rejected match."""

    rule_id: str
    source_location: str
    offset: int
    reason: str  # one of the REASON_* constants


def context_window(content: str, offset: int, length: int, radius: int = CONTEXT_RADIUS) -> Tuple[int, int]:
    """Return ``(start, end)`` of the window *radius* chars around a match."""
    start = max(0, offset - radius)
    end = min(len(content), offset + length + radius)
    return start, end


def line_at(content: str, offset: int) -> str:
    """Return the full line of *content* containing *offset*."""
    start = content.rfind("\n", 0, offset) + 1
    end = content.find("\n", offset)
    return content[start:] if end == -1 else content[start:end]


def is_benign_shape(text: str) -> bool:
    return any(p.search(text) for p in BENIGN_SHAPE_PATTERNS)


def has_asset_context(context: str) -> bool:
    return any(p.search(context) for p in ASSET_CONTEXT_PATTERNS)


def is_likely_base64(text: str, context: str, leading: Optional[str] = None) -> bool:
    """Return True if *text* looks like encoded payload rather than a secret.

    *leading* is the text immediately before the match; when omitted the
    first ``CONTEXT_RADIUS`` chars of *context* are used.
    """
    if _DATA_URI_RE.search(context):
        return True
    if len(text) > 100 and _PADDED_RE.search(text):
        return True
    if len(text) > 200 and _BASE64_ALPHABET_RE.match(text):
        return True
    before = context[:CONTEXT_RADIUS] if leading is None else leading
    if _DATA_KEY_VALUE_RE.search(before):
        return True
    if _DATA_ASSIGNMENT_RE.search(before):
        return True
    return False


def is_comment_line(line: str) -> bool:
    """Return True if the line is a ``//``, ``/*`` or ``*`` comment line."""
    return line.strip().startswith(_COMMENT_PREFIXES)


def false_positive_reason(content: str, offset: int, text: str) -> Optional[str]:
    """Run the heuristics in order; return the first rejection reason or None."""
    if is_benign_shape(text):
        return REASON_BENIGN_SHAPE

    start, end = context_window(content, offset, len(text))
    context = content[start:end]
    if has_asset_context(context):
        return REASON_ASSET_CONTEXT

    if is_likely_base64(text, context, leading=content[start:offset]):
        return REASON_BASE64_DATA

    if is_comment_line(line_at(content, offset)):
        return REASON_COMMENT_LINE

    return None
