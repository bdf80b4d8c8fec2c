"""Map structural paths back to line numbers in JSON source text.

Generic JSON parsers drop source positions, so a validator can only say
*which* value is wrong (``/states/0/transitions/1``), not *where* it is.
``PathLocator`` recovers the position from the raw text, trying in order:

1. structural resolution: confirm the path in the parsed document, then
   re-scan the text with a container stack until the exact key or array
   element is reached (line and column);
2. root-level property search for errors with an empty path that name a
   property;
3. text search for the deepest step that can be found when the document
   does not parse or the path does not exist in it (line only);
4. give up and return ``None``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from schemaline.models.errors import (
    SourceLocation,
    StructuralError,
    StructuralPath,
    format_pointer,
)
from schemaline.parser.scanner import TokenScanner
from schemaline.parser.walker import resolved_depth, step_into

logger = logging.getLogger("schemaline.locator")

_UNPARSED: Any = object()


def _is_index(step: Any) -> bool:
    if isinstance(step, bool):
        return False
    if isinstance(step, int):
        return step >= 0
    return isinstance(step, str) and step.isascii() and step.isdigit()


def _key_pattern(name: str) -> re.Pattern[str]:
    quoted = json.dumps(name, ensure_ascii=False)
    return re.compile(re.escape(quoted) + r"\s*:")


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _decode_key(raw: str) -> str:
    try:
        return json.loads(f'"{raw}"')
    except ValueError:
        return raw


def _normalize(document: Any, path: StructuralPath) -> StructuralPath:
    """Coerce steps to the container types they address in ``document``."""
    steps: list[Any] = []
    current = document
    for step in path:
        if isinstance(current, list):
            steps.append(int(step))
        else:
            steps.append(str(step))
        current = step_into(current, step)
    return tuple(steps)


@dataclass
class _Frame:
    """One open container while re-scanning the text."""

    is_array: bool
    path: StructuralPath
    index: int = -1
    expecting: bool = True  # next token starts an element (array) or key (object)
    key: str | None = None
    key_start: tuple[int, int] | None = None
    reading_key: bool = False

    def child_path(self) -> StructuralPath:
        if self.is_array:
            return self.path + (self.index,)
        return self.path + (self.key,)


class PathLocator:
    """Resolve structural paths to ``SourceLocation`` objects.

    Every public method is total: internal failures are logged at DEBUG
    level and reported as ``None``.
    """

    def resolve(
        self,
        text: str,
        path: StructuralPath,
        *,
        named_property: str | None = None,
        document: Any = _UNPARSED,
    ) -> SourceLocation | None:
        """Return the location where ``path`` begins in ``text``.

        ``named_property`` is the property an error with an empty path refers
        to.  Pass ``document`` when the caller already parsed ``text``.
        """
        try:
            return self._resolve(text, tuple(path), named_property, document)
        except Exception:  # noqa: BLE001
            logger.debug(
                "Location lookup failed for %r", format_pointer(tuple(path)), exc_info=True
            )
            return None

    def locate(
        self, text: str, error: StructuralError, *, document: Any = _UNPARSED
    ) -> SourceLocation | None:
        """Resolve the location of a structural error."""
        return self.resolve(
            text, error.path, named_property=error.property_name, document=document
        )

    # -- strategies ----------------------------------------------------------

    def _resolve(
        self,
        text: str,
        path: StructuralPath,
        named_property: str | None,
        document: Any,
    ) -> SourceLocation | None:
        if not path:
            if named_property:
                return self._resolve_root_property(text, named_property)
            return None

        if document is _UNPARSED:
            try:
                document = json.loads(text)
            except (ValueError, RecursionError):
                return self._resolve_by_text_search(text, path, 0)

        depth = resolved_depth(document, path)
        if depth < len(path):
            location = self._resolve_by_text_search(text, path, depth)
            if location is None and depth > 0:
                # nearest existing ancestor
                location = self._resolve_structurally(
                    text, _normalize(document, path[:depth])
                )
            return location

        try:
            location = self._resolve_structurally(text, _normalize(document, path))
        except Exception:  # noqa: BLE001
            logger.debug("Structural scan failed, falling back to text search", exc_info=True)
            location = None
        if location is None:
            location = self._resolve_by_text_search(text, path, 0)
        return location

    def _resolve_structurally(
        self, text: str, target: StructuralPath
    ) -> SourceLocation | None:
        """Re-scan ``text`` tracking the path of every key and element."""
        stack: list[_Frame] = []
        for event in TokenScanner().scan(text):
            top = stack[-1] if stack else None

            if event.opened_string:
                if top is None:
                    continue
                if not top.is_array and top.expecting:
                    top.reading_key = True
                    top.key_start = (event.line, event.column)
                elif top.is_array and top.expecting:
                    top.index += 1
                    top.expecting = False
                    if top.child_path() == target:
                        return SourceLocation(line=event.line, column=event.column)
                continue

            if event.closed_string is not None:
                if top is not None and top.reading_key:
                    top.reading_key = False
                    top.expecting = False
                    top.key = _decode_key(event.closed_string)
                    if top.child_path() == target and top.key_start is not None:
                        line, column = top.key_start
                        return SourceLocation(line=line, column=column)
                continue

            if not event.structural or event.char.isspace():
                continue

            char = event.char
            if top is not None and top.is_array and top.expecting and char not in ",]":
                top.index += 1
                top.expecting = False
                if top.child_path() == target:
                    return SourceLocation(line=event.line, column=event.column)

            if char in "{[":
                child = top.child_path() if top is not None else ()
                stack.append(_Frame(is_array=char == "[", path=child))
            elif char in "}]":
                if stack:
                    stack.pop()
            elif char == "," and top is not None:
                top.expecting = True
                if not top.is_array:
                    top.key = None
        return None

    def _resolve_root_property(self, text: str, name: str) -> SourceLocation | None:
        """First line declaring ``"<name>":`` anywhere in the text."""
        match = _key_pattern(name).search(text)
        if match is None:
            return None
        return SourceLocation(line=_line_of(text, match.start()))

    def _resolve_by_text_search(
        self, text: str, path: StructuralPath, start: int
    ) -> SourceLocation | None:
        """Search for the unresolved suffix ``path[start:]`` textually.

        The deepest step is tried first; if it cannot be found the search
        moves up towards the resolved prefix.
        """
        for position in range(len(path) - 1, max(start, 0) - 1, -1):
            step = path[position]
            if _is_index(step):
                if position == 0 or _is_index(path[position - 1]):
                    continue
                line = self._array_element_line(text, str(path[position - 1]), int(step))
            else:
                found = self._resolve_root_property(text, str(step))
                line = found.line if found is not None else None
            if line is not None:
                return SourceLocation(line=line)
        return None

    def _array_element_line(self, text: str, parent: str, index: int) -> int | None:
        """Line of the ``index``-th object in the array under ``parent``."""
        match = _key_pattern(parent).search(text)
        if match is None:
            return None
        # the match may span lines ("key"\n:), scanning starts after it
        line_offset = _line_of(text, match.end()) - 1
        base_bracket: int | None = None
        base_brace = 0
        count = 0
        for event in TokenScanner().scan(text[match.end():]):
            if not event.structural or event.char.isspace():
                continue
            if base_bracket is None:
                if event.char != "[":
                    return None
                base_bracket = event.bracket_depth
                base_brace = event.brace_depth
                continue
            if event.char == "]" and event.bracket_depth < base_bracket:
                return None
            if (
                event.char == "{"
                and event.bracket_depth == base_bracket
                and event.brace_depth == base_brace + 1
            ):
                if count == index:
                    return event.line + line_offset
                count += 1
        return None
