"""Convert ``jsonschema`` validation errors into structural errors."""

from __future__ import annotations

import re
from typing import Any

from jsonschema.exceptions import ValidationError

from schemaline.models.errors import StructuralError


def _is_plain(value: Any) -> bool:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return True
    if isinstance(value, list):
        return all(_is_plain(item) for item in value)
    return False


def _missing_property(error: ValidationError) -> str | None:
    required = error.validator_value if isinstance(error.validator_value, list) else []
    missing = [name for name in required if name not in error.instance]
    # one error is emitted per missing name; its message starts with repr(name)
    for name in missing:
        if error.message.startswith(repr(name)):
            return name
    return missing[0] if missing else None


def _additional_properties(error: ValidationError) -> list[str]:
    schema = error.schema if isinstance(error.schema, dict) else {}
    declared = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    return [
        name
        for name in error.instance
        if name not in declared and not any(re.search(p, name) for p in patterns)
    ]


def structural_errors(error: ValidationError) -> list[StructuralError]:
    """Translate one ``jsonschema`` error.

    Missing required properties and rejected additional properties carry
    the property name in ``params``; a single ``additionalProperties``
    failure naming several properties becomes one error per property.
    """
    path = tuple(error.absolute_path)

    if error.validator == "required" and isinstance(error.instance, dict):
        name = _missing_property(error)
        if name is not None:
            return [
                StructuralError.from_raw(path, error.message, {"missingProperty": name})
            ]

    if (
        error.validator == "additionalProperties"
        and error.validator_value is False
        and isinstance(error.instance, dict)
    ):
        extras = _additional_properties(error)
        if extras:
            # with patternProperties jsonschema words this as a regex mismatch
            return [
                StructuralError.from_raw(
                    path,
                    f"Additional properties are not allowed ({name!r} was unexpected)",
                    {"additionalProperty": name},
                )
                for name in extras
            ]

    params: dict[str, Any] = {}
    if isinstance(error.validator, str) and _is_plain(error.validator_value):
        params[error.validator] = error.validator_value
    return [StructuralError.from_raw(path, error.message, params)]
