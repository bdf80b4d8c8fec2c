"""FastAPI application factory for schemaline."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from schemaline import __version__
from schemaline.api.deps import init_registry, reset_registry
from schemaline.api.middleware import RequestBodyLimitMiddleware
from schemaline.api.routers import validation
from schemaline.api.schemas import HealthResponse
from schemaline.parser.loader import DocumentLoader
from schemaline.settings import Settings
from schemaline.validation.pipeline import ValidationPipeline
from schemaline.validation.registry import SchemaRegistry

logger = logging.getLogger("schemaline.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Load schemas into the registry for the lifetime of the application."""
    settings: Settings = app.state.settings
    registry = SchemaRegistry(settings.directory_types)
    if settings.schema_dir is not None:
        registry.load_directory(settings.schema_dir)
    else:
        logger.warning("SCHEMA_DIR not set; no schema types are registered")
    pipeline = ValidationPipeline(
        loader=DocumentLoader(max_document_size=settings.max_document_size),
        extension=settings.document_extension,
    )
    init_registry(registry, pipeline)
    try:
        yield
    finally:
        reset_registry()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="schemaline",
        description="Validates JSON documents against schemas and reports source lines.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        RequestBodyLimitMiddleware, max_document_size=settings.max_document_size
    )

    app.include_router(validation.router, tags=["validation"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "schemaline API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "schemaline.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
