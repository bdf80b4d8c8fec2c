"""Dependency injection for FastAPI: SchemaRegistry and pipeline singletons."""

from __future__ import annotations

from schemaline.parser.locator import PathLocator
from schemaline.validation.pipeline import ValidationPipeline
from schemaline.validation.registry import SchemaRegistry

_registry: SchemaRegistry | None = None
_pipeline: ValidationPipeline | None = None
_locator = PathLocator()


def init_registry(registry: SchemaRegistry, pipeline: ValidationPipeline | None = None) -> None:
    """Set the global SchemaRegistry (called at app startup)."""
    global _registry, _pipeline  # noqa: PLW0603
    _registry = registry
    _pipeline = pipeline or ValidationPipeline(locator=_locator)


def get_registry() -> SchemaRegistry:
    """FastAPI ``Depends`` provider for SchemaRegistry."""
    if _registry is None:
        raise RuntimeError("SchemaRegistry not initialised, call init_registry() first")
    return _registry


def get_pipeline() -> ValidationPipeline:
    """FastAPI ``Depends`` provider for ValidationPipeline."""
    if _pipeline is None:
        raise RuntimeError("ValidationPipeline not initialised, call init_registry() first")
    return _pipeline


def get_locator() -> PathLocator:
    return _locator


def reset_registry() -> None:
    """Clear the global SchemaRegistry (for tests)."""
    global _registry, _pipeline  # noqa: PLW0603
    _registry = None
    _pipeline = None
