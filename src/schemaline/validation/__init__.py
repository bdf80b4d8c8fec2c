"""Schema validation pipeline for schemaline."""

from schemaline.validation.formatter import format_error
from schemaline.validation.pipeline import RootDirectoryError, ValidationPipeline
from schemaline.validation.registry import (
    DEFAULT_DIRECTORY_TYPES,
    SchemaRegistry,
    SchemaValidator,
    UnknownSchemaTypeError,
)

__all__ = [
    "DEFAULT_DIRECTORY_TYPES",
    "RootDirectoryError",
    "SchemaRegistry",
    "SchemaValidator",
    "UnknownSchemaTypeError",
    "ValidationPipeline",
    "format_error",
]
