"""Schema registry: compile schemas and classify documents by directory."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from schemaline.models.errors import StructuralError
from schemaline.validation.ingest import structural_errors

logger = logging.getLogger("schemaline.registry")

# Component directories of a domain tree and the schema type of their documents.
DEFAULT_DIRECTORY_TYPES: dict[str, str] = {
    "Schemas": "schema",
    "Workflows": "workflow",
    "Tasks": "task",
    "Views": "view",
    "Functions": "function",
    "Extensions": "extension",
}

_SCHEMA_SUFFIXES = (".schema.json", ".schema.yaml", ".schema.yml")

DocumentValidator = Callable[[Any], list[StructuralError]]


class UnknownSchemaTypeError(Exception):
    """Raised when a requested schema type is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.schema_type = name
        self.available = available
        super().__init__(
            f"Unknown schema type '{name}'. Available: {', '.join(available) or 'none'}"
        )


class SchemaCompileError(Exception):
    """Raised when a schema definition is not a valid JSON Schema."""

    def __init__(self, schema_type: str, reason: str) -> None:
        self.schema_type = schema_type
        super().__init__(f"Could not compile validator for '{schema_type}': {reason}")


class SchemaValidator:
    """Compiled validator for one schema type.

    The draft is picked from the schema's ``$schema`` (Draft 2020-12 when
    absent); format assertions are enabled.
    """

    def __init__(self, schema_type: str, schema: Mapping[str, Any] | bool) -> None:
        self.schema_type = schema_type
        cls = validator_for(schema, default=Draft202012Validator)
        try:
            cls.check_schema(schema)
        except SchemaError as exc:
            raise SchemaCompileError(schema_type, exc.message) from exc
        self._validator = cls(schema, format_checker=FormatChecker())

    def __call__(self, document: Any) -> list[StructuralError]:
        errors: list[StructuralError] = []
        for error in self._validator.iter_errors(document):
            errors.extend(structural_errors(error))
        return errors


class SchemaRegistry:
    """Registry of compiled validators keyed by schema type."""

    def __init__(self, directory_types: Mapping[str, str] | None = None) -> None:
        if directory_types is None:
            directory_types = DEFAULT_DIRECTORY_TYPES
        self._directory_types = dict(directory_types)
        self._validators: dict[str, SchemaValidator] = {}
        self._yaml = YAML(typ="safe", pure=True)

    @property
    def directory_types(self) -> dict[str, str]:
        return dict(self._directory_types)

    def register(self, schema_type: str, schema: Mapping[str, Any] | bool) -> SchemaValidator:
        """Compile and register a schema, replacing any previous one."""
        validator = SchemaValidator(schema_type, schema)
        self._validators[schema_type] = validator
        return validator

    def load_schema_file(self, path: Path) -> Any:
        """Read a JSON or YAML schema definition."""
        with path.open("r", encoding="utf-8") as handle:
            if path.name.endswith(".json"):
                return json.load(handle)
            return self._yaml.load(handle)

    def load_directory(self, schema_dir: Path) -> list[str]:
        """Register every ``<type>.schema.{json,yaml,yml}`` file in a directory.

        Schemas that cannot be read or compiled are skipped with a warning.
        Returns the schema types that were registered.
        """
        loaded: list[str] = []
        for path in sorted(schema_dir.iterdir()):
            suffix = next((s for s in _SCHEMA_SUFFIXES if path.name.endswith(s)), None)
            if suffix is None or not path.is_file():
                continue
            schema_type = path.name[: -len(suffix)]
            try:
                self.register(schema_type, self.load_schema_file(path))
            except (OSError, ValueError, YAMLError, SchemaCompileError) as exc:
                logger.warning("Skipping schema %s: %s", path, exc)
                continue
            loaded.append(schema_type)
        logger.info("Loaded %d schema(s) from %s", len(loaded), schema_dir)
        return loaded

    def get(self, schema_type: str) -> SchemaValidator:
        """Return the validator for ``schema_type``."""
        if schema_type not in self._validators:
            raise UnknownSchemaTypeError(schema_type, available=self.available())
        return self._validators[schema_type]

    def available(self) -> list[str]:
        """List registered schema types."""
        return sorted(self._validators.keys())

    def classify(self, directory_name: str) -> str | None:
        """Schema type for documents in ``directory_name``, if any."""
        return self._directory_types.get(directory_name)

    def validators(self) -> dict[str, DocumentValidator]:
        return dict(self._validators)
