"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from schemaline.validation.registry import DEFAULT_DIRECTORY_TYPES


class Settings(BaseSettings):
    """Configuration for the schemaline CLI and REST API server.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.  ``DIRECTORY_TYPES`` takes a JSON object.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # Validation
    schema_dir: Path | None = None
    document_extension: str = ".json"
    directory_types: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_DIRECTORY_TYPES)
    )
    max_document_size: int = 5_000_000  # characters

    # REST API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # Cloud Run injects PORT; takes precedence over api_server_port

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (Cloud Run PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port
