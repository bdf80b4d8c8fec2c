"""Pydantic report models for schemaline."""

from schemaline.models.errors import (
    ErrorKind,
    FileReport,
    LocatedError,
    SourceLocation,
    Step,
    StructuralError,
    StructuralPath,
    SyntaxFailure,
    ValidationSummary,
    format_pointer,
    parse_pointer,
)

__all__ = [
    "ErrorKind",
    "FileReport",
    "LocatedError",
    "SourceLocation",
    "Step",
    "StructuralError",
    "StructuralPath",
    "SyntaxFailure",
    "ValidationSummary",
    "format_pointer",
    "parse_pointer",
]
