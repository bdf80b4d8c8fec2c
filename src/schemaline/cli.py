"""Command-line entry point: validate document trees and report line numbers.

Usage:
  schemaline path/to/domain --schema-dir schemas/
  schemaline path/to/domain --schema-dir schemas/ --type Mappings=mapping --format json
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from schemaline import __version__
from schemaline.console import render_summary
from schemaline.parser.loader import DocumentLoader
from schemaline.settings import Settings
from schemaline.validation.pipeline import RootDirectoryError, ValidationPipeline
from schemaline.validation.registry import SchemaRegistry

logger = logging.getLogger("schemaline.cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FATAL = 2


def _type_override(value: str) -> tuple[str, str]:
    directory, sep, schema_type = value.partition("=")
    if not sep or not directory or not schema_type:
        raise argparse.ArgumentTypeError(f"expected DIRECTORY=TYPE, got {value!r}")
    return directory, schema_type


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="schemaline",
        description="Validate JSON document trees against schemas, with line numbers.",
    )
    ap.add_argument("roots", nargs="+", type=Path, help="Root directories to scan")
    ap.add_argument(
        "--schema-dir",
        type=Path,
        help="Directory of <type>.schema.json/.yaml files (default: SCHEMA_DIR)",
    )
    ap.add_argument(
        "--type",
        dest="types",
        action="append",
        default=[],
        type=_type_override,
        metavar="DIRECTORY=TYPE",
        help="Map a directory name to a schema type (repeatable)",
    )
    ap.add_argument("--ext", help="Document file extension (default: .json)")
    ap.add_argument("--format", choices=["text", "json"], default="text")
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    """Run the validator; returns the process exit code."""
    args = build_parser().parse_args(argv)
    settings = Settings()

    level = "DEBUG" if args.verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )

    schema_dir = args.schema_dir or settings.schema_dir
    if schema_dir is None:
        logger.error("No schema directory given (use --schema-dir or SCHEMA_DIR)")
        return EXIT_FATAL

    directory_types = dict(settings.directory_types)
    directory_types.update(dict(args.types))
    registry = SchemaRegistry(directory_types)
    try:
        registry.load_directory(schema_dir)
    except OSError as exc:
        logger.error("Cannot read schema directory %s: %s", schema_dir, exc)
        return EXIT_FATAL
    if not registry.available():
        logger.warning("No validators available, only JSON syntax will be checked")

    pipeline = ValidationPipeline(
        loader=DocumentLoader(max_document_size=settings.max_document_size),
        extension=args.ext or settings.document_extension,
    )
    try:
        summary = pipeline.run(args.roots, registry.classify, registry.validators())
    except RootDirectoryError as exc:
        logger.error("%s", exc)
        return EXIT_FATAL

    if args.format == "json":
        sys.stdout.write(summary.model_dump_json(indent=2) + "\n")
    else:
        render_summary(summary)
    return EXIT_OK if summary.ok else EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
