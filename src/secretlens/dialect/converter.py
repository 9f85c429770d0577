"""Dialect converter — rewrite PCRE / Kingfisher-style patterns for ``regex``.

Stages (each walks the pattern with the shared ``PatternCursor``):

  1. ``has_extended_flag``       — is ``x`` in the leading ``(?flags)`` header?
  2. ``strip_comments``          — ``(?#...)`` groups and ``#`` line comments
  3. ``rewrite_named_groups``    — ``(?P<name>`` → ``(?<name>``
  4. ``extract_flag_header``     — leading ``(?imsx)`` → global flags
  5. ``promote_scoped_flags``    — ``(?i:body)`` → ``(body)`` + global ``i``
  6. ``extract_inline_flags``    — later standalone ``(?i)`` → global flags
  7. ``strip_extended_whitespace`` — free-spacing mode whitespace removal

Scoped flags have no counterpart in the target syntax, so ``i`` and ``s``
requested by a scoped group become pattern-wide. This is a known
approximation and is kept as is.

``convert`` never raises: a stage that fails hands its input on unchanged.
"""

from __future__ import annotations

import re
from typing import Callable, FrozenSet, NamedTuple, Set, Tuple, TypeVar

from secretlens.dialect.cursor import CHAR, PatternCursor, find_group_end
from secretlens.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

#: Flag the scanner treats as "find every occurrence"; always present.
FIND_ALL_FLAG = "g"

# Foreign flag letter -> native flag letter. ``x`` and ``u`` have no native
# flag: ``x`` switches on whitespace stripping, ``u`` is the default.
_FLAG_MAP = {"i": "i", "m": "m", "s": "s"}
_PROMOTABLE = ("i", "s")

_FLAG_HEADER_RE = re.compile(r"\(\?([imsux]+)\)")
_SCOPED_FLAGS_RE = re.compile(r"\(\?([imsux]*)(?:-([imsux]+))?:")
_NAMED_GROUP_RE = re.compile(r"\(\?P<([A-Za-z_][A-Za-z0-9_]*)>")
_COMMENT_TAIL_RE = re.compile(r"[\s\w]*")
_EXTENDED_WS = " \t\n\r"


class ConvertedPattern(NamedTuple):
    native_pattern: str
    native_flags: FrozenSet[str]
    extended: bool = False


def _map_flags(letters: str, flags: Set[str]) -> bool:
    """Merge foreign flag *letters* into *flags*. Returns True if ``x`` was seen."""
    for letter in letters:
        native = _FLAG_MAP.get(letter)
        if native is not None:
            flags.add(native)
    return "x" in letters


# ---- comments ----


def has_extended_flag(pattern: str) -> bool:
    """True if the pattern opens with a flag header containing ``x``."""
    m = _FLAG_HEADER_RE.match(pattern)
    return bool(m and "x" in m.group(1))


def _strip_comment_groups(pattern: str) -> str:
    out = []
    cursor = PatternCursor(pattern)
    while not cursor.done:
        if cursor.at_structural("(") and cursor.startswith("(?#"):
            end = pattern.find(")", cursor.pos + 3)
            if end == -1:
                # Unterminated comment: leave the rest alone
                out.append(pattern[cursor.pos:])
                break
            cursor.jump(end + 1)
            continue
        out.append(cursor.step().char)
    return "".join(out)


def _strip_extended_line_comments(pattern: str) -> str:
    out = []
    cursor = PatternCursor(pattern)
    while not cursor.done:
        pos = cursor.pos
        if cursor.at_structural("#") and (pos == 0 or pattern[pos - 1].isspace()):
            newline = pattern.find("\n", pos)
            if newline == -1:
                break
            cursor.jump(newline)
            continue
        out.append(cursor.step().char)
    return "".join(out)


def _strip_trailing_comment(line: str) -> str:
    tokens = list(PatternCursor(line))
    for i, tok in enumerate(tokens):
        if tok.kind != CHAR or tok.char != "#" or i == 0:
            continue
        prev = tokens[i - 1]
        if prev.kind != CHAR or not prev.char.isspace():
            continue
        if _COMMENT_TAIL_RE.fullmatch(line, tok.index + 1):
            return line[: prev.index]
    return line


def strip_comments(pattern: str, extended: bool = False) -> str:
    """Remove inline comment groups, plus ``#`` comments as the mode allows.

    ``(?#...)`` groups always go. In extended mode a ``#`` at line start or
    after whitespace ends the line. Otherwise only a trailing
    ``<space>#words`` at the end of a line is dropped.
    """
    pattern = _strip_comment_groups(pattern)
    if extended:
        return _strip_extended_line_comments(pattern)
    return "\n".join(_strip_trailing_comment(line) for line in pattern.split("\n"))


# ---- groups and flags ----


def rewrite_named_groups(pattern: str) -> str:
    """Rewrite ``(?P<name>`` openers to ``(?<name>``."""
    out = []
    cursor = PatternCursor(pattern)
    while not cursor.done:
        if cursor.at_structural("("):
            m = _NAMED_GROUP_RE.match(pattern, cursor.pos)
            if m is not None:
                out.append(f"(?<{m.group(1)}>")
                cursor.jump(m.end())
                continue
        out.append(cursor.step().char)
    return "".join(out)


def extract_flag_header(pattern: str) -> Tuple[str, Set[str], bool]:
    """Strip a leading ``(?flags)`` header.

    Returns ``(rest, native_flags, extended)``.
    """
    flags: Set[str] = set()
    m = _FLAG_HEADER_RE.match(pattern)
    if m is None:
        return pattern, flags, False
    extended = _map_flags(m.group(1), flags)
    return pattern[m.end():], flags, extended


def promote_scoped_flags(pattern: str, flags: Set[str]) -> Tuple[str, Set[str]]:
    """Replace ``(?flags:body)`` groups with ``(body)``.

    A group is only rewritten when its closing paren is found. ``i`` and ``s``
    switched on by the group are added to the global flag set.
    """
    promoted = set(flags)
    out = []
    cursor = PatternCursor(pattern)
    while not cursor.done:
        if cursor.at_structural("("):
            m = _SCOPED_FLAGS_RE.match(pattern, cursor.pos)
            if (
                m is not None
                and (m.group(1) or m.group(2))
                and find_group_end(pattern, cursor.pos) is not None
            ):
                enabled = m.group(1)
                for letter in _PROMOTABLE:
                    if letter in enabled and letter not in promoted:
                        promoted.add(letter)
                out.append("(")
                cursor.jump(m.end())
                continue
        out.append(cursor.step().char)
    return "".join(out), promoted


def extract_inline_flags(pattern: str, flags: Set[str]) -> Tuple[str, Set[str], bool]:
    """Remove standalone ``(?flags)`` markers anywhere and merge them globally."""
    merged = set(flags)
    extended = False
    out = []
    cursor = PatternCursor(pattern)
    while not cursor.done:
        if cursor.at_structural("("):
            m = _FLAG_HEADER_RE.match(pattern, cursor.pos)
            if m is not None:
                extended = _map_flags(m.group(1), merged) or extended
                cursor.jump(m.end())
                continue
        out.append(cursor.step().char)
    return "".join(out), merged, extended


def strip_extended_whitespace(pattern: str) -> str:
    """Drop unescaped whitespace outside character classes."""
    return "".join(
        tok.char
        for tok in PatternCursor(pattern)
        if not (tok.kind == CHAR and tok.char in _EXTENDED_WS)
    )


# ---- pipeline ----


def _guarded(stage: str, fallback: T, fn: Callable[..., T], *args) -> T:
    try:
        return fn(*args)
    except Exception as exc:  # noqa: BLE001
        logger.debug("dialect_stage_skipped", stage=stage, error=type(exc).__name__)
        return fallback


def translate(pattern: str) -> ConvertedPattern:
    """Convert an already comment-stripped pattern (stages 3–7)."""
    pattern = _guarded("named_groups", pattern, rewrite_named_groups, pattern)
    body, flags, extended = _guarded(
        "flag_header", (pattern, set(), False), extract_flag_header, pattern
    )
    body, flags = _guarded(
        "scoped_flags", (body, flags), promote_scoped_flags, body, flags
    )
    body, flags, inline_extended = _guarded(
        "inline_flags", (body, flags, False), extract_inline_flags, body, flags
    )
    extended = extended or inline_extended
    if extended:
        body = _guarded("extended_whitespace", body, strip_extended_whitespace, body)
    flags.add(FIND_ALL_FLAG)
    return ConvertedPattern(body, frozenset(flags), extended)


def convert(pattern: str) -> ConvertedPattern:
    """Full conversion of a raw foreign-dialect pattern."""
    extended = _guarded("extended_probe", False, has_extended_flag, pattern)
    cleaned = _guarded("comments", pattern, strip_comments, pattern, extended)
    return translate(cleaned)
