"""Document validation and location lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from schemaline.api.deps import get_locator, get_pipeline, get_registry
from schemaline.api.schemas import (
    ErrorDetail,
    LocateRequest,
    LocateResponse,
    SchemaTypeInfo,
    SchemaTypeListResponse,
    ValidateRequest,
    ValidateResponse,
)
from schemaline.models.errors import parse_pointer
from schemaline.parser.locator import PathLocator
from schemaline.validation.pipeline import ValidationPipeline
from schemaline.validation.registry import SchemaRegistry, UnknownSchemaTypeError

router = APIRouter()


@router.get("/schema-types", response_model=SchemaTypeListResponse)
async def list_schema_types(
    registry: SchemaRegistry = Depends(get_registry),  # noqa: B008
) -> SchemaTypeListResponse:
    """List registered schema types with their directory names."""
    directories: dict[str, list[str]] = {}
    for directory, schema_type in registry.directory_types.items():
        directories.setdefault(schema_type, []).append(directory)
    return SchemaTypeListResponse(
        schema_types=[
            SchemaTypeInfo(name=name, directories=sorted(directories.get(name, [])))
            for name in registry.available()
        ]
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_document(
    body: ValidateRequest,
    registry: SchemaRegistry = Depends(get_registry),  # noqa: B008
    pipeline: ValidationPipeline = Depends(get_pipeline),  # noqa: B008
) -> ValidateResponse:
    """Validate one document and locate every error in its text."""
    try:
        validator = registry.get(body.schema_type)
    except UnknownSchemaTypeError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from None

    report = pipeline.check_text(
        body.document, body.schema_type, validator, file_path=body.file_path
    )
    return ValidateResponse(
        valid=report.passed,
        file_path=report.file_path,
        schema_type=body.schema_type,
        errors=[
            ErrorDetail(
                pointer=located.error.pointer,
                message=located.rendered,
                kind=located.error.kind,
                line=located.location.line if located.location else None,
                column=located.location.column if located.location else None,
                params=located.error.params,
            )
            for located in report.errors
        ],
    )


@router.post("/locate", response_model=LocateResponse)
async def locate_path(
    body: LocateRequest,
    locator: PathLocator = Depends(get_locator),  # noqa: B008
) -> LocateResponse:
    """Resolve a JSON pointer to its line (and column) in the document."""
    location = locator.resolve(
        body.document, parse_pointer(body.pointer), named_property=body.named_property
    )
    if location is None:
        return LocateResponse(found=False)
    return LocateResponse(found=True, line=location.line, column=location.column)
