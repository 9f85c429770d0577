"""Pattern cursor — the one character-class and escape aware walker.

Every dialect transform and the validator walk patterns with this cursor so
that they agree on what is escaped and what sits inside a character class.

Rules the cursor applies:
  - A backslash consumes exactly the next character (``\\\\(`` is an escaped
    backslash followed by a real paren).
  - ``[`` opens a class; inside a class ``[`` is literal except for a POSIX
    bracket such as ``[:alpha:]``, which nests one level.
  - ``]`` directly after ``[`` or ``[^`` is a literal member of the class.
"""

from __future__ import annotations

import re
from typing import Iterator, NamedTuple, Optional

# Token kinds
CHAR = "char"  # ordinary character outside any class
ESCAPE = "escape"  # a backslash that escapes the next character
ESCAPED = "escaped"  # the character following an escape
CLASS_OPEN = "class_open"
CLASS_CLOSE = "class_close"
CLASS = "class"  # any other character inside a class

_POSIX_RE = re.compile(r"\[:\^?[A-Za-z]+:\]")


class Token(NamedTuple):
    index: int
    char: str
    kind: str
    in_class: bool  # class state *before* this token was consumed


class PatternCursor:
    """Stateful left-to-right walk over a regex pattern string."""

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos
        self.class_depth = 0
        self.escaped = False
        self._literal_close_at = -1
        self._posix_close_at = -1

    @property
    def done(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def in_class(self) -> bool:
        return self.class_depth > 0

    def startswith(self, prefix: str, offset: int = 0) -> bool:
        return self.text.startswith(prefix, self.pos + offset)

    def peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        return self.text[idx] if 0 <= idx < len(self.text) else ""

    def at_structural(self, char: str) -> bool:
        """True if the next token is *char* as syntax (unescaped, outside a class)."""
        return (
            not self.escaped
            and not self.in_class
            and self.peek() == char
        )

    def jump(self, pos: int) -> None:
        """Move to *pos* outside any class and escape (used after skipping a span)."""
        self.pos = pos
        self.escaped = False
        self.class_depth = 0

    def step(self) -> Token:
        """Consume one character and return its token."""
        idx = self.pos
        ch = self.text[idx]
        was_in_class = self.in_class
        self.pos += 1

        if self.escaped:
            self.escaped = False
            return Token(idx, ch, ESCAPED, was_in_class)

        if ch == "\\":
            self.escaped = True
            return Token(idx, ch, ESCAPE, was_in_class)

        if not was_in_class:
            if ch == "[":
                self.class_depth = 1
                body = idx + 1
                if self.text.startswith("^", body):
                    body += 1
                self._literal_close_at = body
                return Token(idx, ch, CLASS_OPEN, was_in_class)
            return Token(idx, ch, CHAR, was_in_class)

        # Inside a class
        if ch == "]":
            if idx == self._literal_close_at:
                return Token(idx, ch, CLASS, was_in_class)
            if self.class_depth > 1 and idx != self._posix_close_at:
                return Token(idx, ch, CLASS, was_in_class)
            self.class_depth -= 1
            return Token(idx, ch, CLASS_CLOSE, was_in_class)

        if ch == "[" and self.class_depth == 1:
            m = _POSIX_RE.match(self.text, idx)
            if m is not None:
                self.class_depth = 2
                self._posix_close_at = m.end() - 1
                return Token(idx, ch, CLASS_OPEN, was_in_class)

        return Token(idx, ch, CLASS, was_in_class)

    def __iter__(self) -> Iterator[Token]:
        while not self.done:
            yield self.step()


def find_group_end(text: str, open_index: int) -> Optional[int]:
    """Return the index of the paren closing the group opened at *open_index*.

    Parens inside classes and escaped parens are skipped. Returns None when
    the group is never closed.
    """
    cursor = PatternCursor(text, open_index + 1)
    depth = 1
    for tok in cursor:
        if tok.kind != CHAR:
            continue
        if tok.char == "(":
            depth += 1
        elif tok.char == ")":
            depth -= 1
            if depth == 0:
                return tok.index
    return None
