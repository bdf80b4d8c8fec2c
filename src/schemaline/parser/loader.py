"""JSON document loader that keeps the source text for location lookups."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from schemaline.models.errors import SourceLocation

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters

# "line 94 column 107" / "(line 94 column 107)" in parser messages
_LINE_RE = re.compile(r"line\s+(\d+)", re.IGNORECASE)
_COLUMN_RE = re.compile(r"column\s+(\d+)", re.IGNORECASE)


class DocumentError(Exception):
    """Base class for documents that cannot be validated."""

    def __init__(self, message: str, location: SourceLocation | None = None) -> None:
        self.location = location
        super().__init__(message)


class DocumentUnreadableError(DocumentError):
    """Raised when a document cannot be read or decoded."""


class DocumentMalformedError(DocumentError):
    """Raised when a document is not valid JSON."""


class DocumentSafetyError(DocumentError):
    """Raised when a document violates size constraints."""


def location_from_message(message: str) -> SourceLocation | None:
    """Extract a best-effort line/column from a parser error message."""
    line_match = _LINE_RE.search(message)
    if line_match is None:
        return None
    line = int(line_match.group(1))
    if line < 1:
        return None
    column_match = _COLUMN_RE.search(message)
    column = int(column_match.group(1)) if column_match else None
    return SourceLocation(line=line, column=column if column else None)


@dataclass
class LoadedDocument:
    """Raw text plus the parsed value of one JSON document."""

    source: str
    text: str
    data: Any


class DocumentLoader:
    """Reads and parses JSON documents, keeping their text."""

    def __init__(self, max_document_size: int = _MAX_DOCUMENT_SIZE) -> None:
        self._max_document_size = max_document_size

    def read(self, path: Path) -> str:
        """Read a document's text, raising ``DocumentUnreadableError``."""
        try:
            with path.open("r", encoding="utf-8-sig") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentUnreadableError(f"Cannot read {path}: {exc}") from exc

    def load(self, path: Path) -> LoadedDocument:
        """Load a JSON file and return its text and parsed value."""
        return self.load_string(self.read(path), source=str(path))

    def load_string(self, text: str, source: str = "<string>") -> LoadedDocument:
        """Parse JSON from a string."""
        if len(text) > self._max_document_size:
            raise DocumentSafetyError(
                f"Document exceeds maximum size "
                f"({len(text):,} chars > {self._max_document_size:,} limit)"
            )
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentMalformedError(
                f"Invalid JSON: {exc.msg}",
                SourceLocation(line=exc.lineno, column=exc.colno),
            ) from exc
        except (ValueError, RecursionError) as exc:
            raise DocumentMalformedError(
                f"Invalid JSON: {exc}", location_from_message(str(exc))
            ) from exc
        return LoadedDocument(source=source, text=text, data=data)
