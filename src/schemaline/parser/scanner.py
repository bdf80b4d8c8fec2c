"""Single-pass character automaton over raw JSON text.

The scanner tracks just enough lexical state (string/escape flags and
brace/bracket nesting) to let callers correlate positions in the text with
structure, without building a parse tree.  It never fails: malformed input
only produces odd depths, possibly negative.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum


class ScanState(StrEnum):
    NORMAL = "normal"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


@dataclass(frozen=True)
class ScanEvent:
    """Scanner state sampled right after one character was consumed."""

    line: int  # 1-based
    column: int  # 1-based
    offset: int
    char: str
    state: ScanState
    brace_depth: int
    bracket_depth: int
    opened_string: bool = False
    closed_string: str | None = None  # raw contents, escapes undecoded

    @property
    def structural(self) -> bool:
        """True for characters outside strings (including closing quotes)."""
        return self.state is ScanState.NORMAL and self.closed_string is None


class TokenScanner:
    """Stateful scanner; feed characters one at a time or scan whole texts."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.in_string = False
        self.escape_next = False
        self.brace_depth = 0
        self.bracket_depth = 0
        self._buffer: list[str] = []

    @property
    def state(self) -> ScanState:
        if self.escape_next:
            return ScanState.ESCAPED
        if self.in_string:
            return ScanState.IN_STRING
        return ScanState.NORMAL

    def feed(self, char: str) -> tuple[bool, str | None]:
        """Consume one character.

        Returns ``(opened, closed)``: whether the character opened a string,
        and the raw string contents if it closed one.
        """
        if self.in_string:
            if self.escape_next:
                self.escape_next = False
                self._buffer.append(char)
            elif char == "\\":
                self.escape_next = True
                self._buffer.append(char)
            elif char == '"':
                self.in_string = False
                closed = "".join(self._buffer)
                self._buffer = []
                return False, closed
            else:
                self._buffer.append(char)
            return False, None

        if char == '"':
            self.in_string = True
            self._buffer = []
            return True, None
        if char == "{":
            self.brace_depth += 1
        elif char == "}":
            self.brace_depth -= 1
        elif char == "[":
            self.bracket_depth += 1
        elif char == "]":
            self.bracket_depth -= 1
        return False, None

    def scan(self, text: str) -> Iterator[ScanEvent]:
        """Scan ``text`` line by line, yielding an event per character.

        Line breaks are ``\\n`` only, matching the line numbers reported by
        the ``json`` module.
        """
        offset = 0
        for line_no, line in enumerate(text.split("\n"), start=1):
            for col, char in enumerate(line, start=1):
                opened, closed = self.feed(char)
                yield ScanEvent(
                    line=line_no,
                    column=col,
                    offset=offset,
                    char=char,
                    state=self.state,
                    brace_depth=self.brace_depth,
                    bracket_depth=self.bracket_depth,
                    opened_string=opened,
                    closed_string=closed,
                )
                offset += 1
            # newline inside a string is invalid JSON; keep going regardless
            offset += 1
