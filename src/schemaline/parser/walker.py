"""Descend a parsed JSON document along a structural path."""

from __future__ import annotations

from typing import Any

from schemaline.models.errors import Step, StructuralPath


class _NotFound:
    _instance: _NotFound | None = None

    def __new__(cls) -> _NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND: Any = _NotFound()


def step_into(current: Any, step: Step) -> Any:
    if isinstance(current, dict):
        key = str(step)
        return current[key] if key in current else NOT_FOUND
    if isinstance(current, list):
        if isinstance(step, bool):
            return NOT_FOUND
        if isinstance(step, str):
            if not (step.isascii() and step.isdigit()):
                return NOT_FOUND
            step = int(step)
        if 0 <= step < len(current):
            return current[step]
    return NOT_FOUND


def walk(document: Any, path: StructuralPath) -> Any:
    """Return the value at ``path`` or ``NOT_FOUND``.

    Partial results are never returned: the first step that does not apply
    to the current value ends the walk.
    """
    current = document
    for step in path:
        current = step_into(current, step)
        if current is NOT_FOUND:
            return NOT_FOUND
    return current


def resolved_depth(document: Any, path: StructuralPath) -> int:
    """Number of leading steps of ``path`` that resolve in ``document``."""
    current = document
    for depth, step in enumerate(path):
        current = step_into(current, step)
        if current is NOT_FOUND:
            return depth
    return len(path)
