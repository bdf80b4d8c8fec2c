"""Structured error models with JSON source position tracking."""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

Step = str | int
StructuralPath = tuple[Step, ...]

_INDEX_RE = re.compile(r"^\d+$")


def parse_pointer(pointer: str) -> StructuralPath:
    """Split a slash-delimited pointer into path steps.

    Empty segments are dropped, so ``"/a//b"`` and ``"a/b"`` give the same
    path and ``""`` or ``"/"`` denote the document root.  All-digit segments
    become array indices.
    """
    steps: list[Step] = []
    for segment in pointer.split("/"):
        if not segment:
            continue
        segment = segment.replace("~1", "/").replace("~0", "~")
        steps.append(int(segment) if _INDEX_RE.match(segment) else segment)
    return tuple(steps)


def format_pointer(path: StructuralPath) -> str:
    """Render path steps back into a JSON pointer (``""`` for the root)."""
    return "".join(
        "/" + str(step).replace("~", "~0").replace("/", "~1") for step in path
    )


class SourceLocation(BaseModel):
    """Points to a line (and possibly a column) in the JSON source text."""

    line: int = Field(ge=1)
    column: int | None = Field(default=None, ge=1)

    def __str__(self) -> str:
        if self.column is None:
            return f"line {self.line}"
        return f"line {self.line}, column {self.column}"


class ErrorKind(StrEnum):
    """Shapes of structural error the formatter renders specially."""

    MISSING_REQUIRED = "missing_required"
    ADDITIONAL_PROPERTY = "additional_property"
    OTHER = "other"


class StructuralError(BaseModel):
    """A single validation failure tied to a structural path."""

    path: StructuralPath = ()
    message: str
    kind: ErrorKind = ErrorKind.OTHER
    params: dict[str, Any] = {}

    @classmethod
    def from_raw(
        cls,
        path: StructuralPath | str,
        message: str,
        params: dict[str, Any] | None = None,
    ) -> StructuralError:
        """Build an error from validator output, deciding its kind once."""
        if isinstance(path, str):
            path = parse_pointer(path)
        params = dict(params or {})
        lowered = message.lower()
        kind = ErrorKind.OTHER
        if "missingProperty" in params and "required" in lowered:
            kind = ErrorKind.MISSING_REQUIRED
        elif "additionalProperty" in params and "additional propert" in lowered:
            kind = ErrorKind.ADDITIONAL_PROPERTY
        return cls(path=tuple(path), message=message, kind=kind, params=params)

    @property
    def pointer(self) -> str:
        return format_pointer(self.path)

    @property
    def property_name(self) -> str | None:
        """The property named by a missing/additional property error."""
        if self.kind is ErrorKind.MISSING_REQUIRED:
            return str(self.params.get("missingProperty"))
        if self.kind is ErrorKind.ADDITIONAL_PROPERTY:
            return str(self.params.get("additionalProperty"))
        return None


class LocatedError(BaseModel):
    """A structural error paired with its resolved location and rendering."""

    error: StructuralError
    location: SourceLocation | None = None
    rendered: str = ""


class FileReport(BaseModel):
    """Schema validation outcome for one classified document."""

    file_path: str
    schema_type: str | None = None
    passed: bool
    errors: list[LocatedError] = []


class SyntaxFailure(BaseModel):
    """An unclassified document that is not well-formed JSON.

    No schema applies to these files, so they are not ``FileReport``s and do
    not count towards ``passed``/``failed``.
    """

    file_path: str
    error: LocatedError


class ValidationSummary(BaseModel):
    """Aggregated result of one validation run."""

    files_visited: int = 0
    files_validated: int = 0
    passed: int = 0
    failed: int = 0
    reports: list[FileReport] = []
    syntax_errors: list[SyntaxFailure] = []

    @property
    def failed_reports(self) -> list[FileReport]:
        return [r for r in self.reports if not r.passed]

    @property
    def ok(self) -> bool:
        """True when no document failed schema or syntax validation."""
        return self.failed == 0 and not self.syntax_errors
