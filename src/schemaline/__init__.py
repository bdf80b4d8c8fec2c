"""schemaline: JSON schema validation with source line diagnostics."""

__version__ = "0.1.0"
