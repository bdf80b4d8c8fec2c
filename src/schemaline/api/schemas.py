"""API request/response Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from schemaline.models.errors import ErrorKind


class ValidateRequest(BaseModel):
    """Request body for POST /validate."""

    document: str = Field(description="JSON document text to validate")
    schema_type: str = Field(description="Registered schema type, e.g. 'workflow'")
    file_path: str = Field(default="<request>", description="Name used in the report")


class ErrorDetail(BaseModel):
    """A single located validation error."""

    pointer: str
    message: str
    kind: ErrorKind
    line: int | None = None
    column: int | None = None
    params: dict[str, object] = {}


class ValidateResponse(BaseModel):
    """Response body for POST /validate."""

    valid: bool
    file_path: str
    schema_type: str
    errors: list[ErrorDetail] = []


class LocateRequest(BaseModel):
    """Request body for POST /locate."""

    document: str = Field(description="JSON document text")
    pointer: str = Field(description="Slash-delimited path, e.g. /states/0/transitions")
    named_property: str | None = Field(
        default=None, description="Property an empty-path error refers to"
    )


class LocateResponse(BaseModel):
    """Response body for POST /locate."""

    found: bool
    line: int | None = None
    column: int | None = None


class SchemaTypeInfo(BaseModel):
    """A registered schema type and the directories mapped to it."""

    name: str
    directories: list[str] = []


class SchemaTypeListResponse(BaseModel):
    """Response for GET /schema-types."""

    schema_types: list[SchemaTypeInfo] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""
