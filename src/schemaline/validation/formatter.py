"""Render structural errors as single diagnostic lines."""

from __future__ import annotations

import json
import re
from typing import Any

from schemaline.models.errors import ErrorKind, SourceLocation, StructuralError

_NAMED_PARAMS = ("missingProperty", "additionalProperty")


def _represented(value: Any, rendered: str) -> bool:
    """Whether ``rendered`` already shows ``value``.

    Strings must appear quoted; lists whole or item by item; numbers only as
    the final token, where jsonschema puts limits ("... the minimum of 1").
    """
    if isinstance(value, str):
        return repr(value) in rendered or json.dumps(value) in rendered
    if isinstance(value, list):
        if repr(value) in rendered or json.dumps(value) in rendered:
            return True
        return bool(value) and all(_represented(item, rendered) for item in value)
    tokens = {repr(value), json.dumps(value, default=str)}
    return any(re.search(rf"(?<![\w.]){re.escape(t)}$", rendered) for t in tokens)


def _extra_params(error: StructuralError, rendered: str) -> dict[str, object]:
    extra: dict[str, object] = {}
    for key, value in error.params.items():
        if key in _NAMED_PARAMS or _represented(value, rendered):
            continue
        extra[key] = value
    return extra


def format_error(error: StructuralError, location: SourceLocation | None) -> str:
    """Format one error, e.g. ``must have required property "name" (line 5)``."""
    if error.kind is ErrorKind.MISSING_REQUIRED:
        message = f'must have required property "{error.property_name}"'
    elif error.kind is ErrorKind.ADDITIONAL_PROPERTY:
        message = f'must NOT have additional property "{error.property_name}"'
    else:
        message = error.message

    extra = _extra_params(error, message)
    if location is not None:
        message += f" (line {location.line})"
    if extra:
        message += f" [params: {json.dumps(extra, sort_keys=True, default=str)}]"
    return message
