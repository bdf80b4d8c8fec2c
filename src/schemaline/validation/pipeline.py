"""Orchestrates schema validation of a document tree: Walk → Classify → Validate → Locate."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from schemaline.models.errors import (
    FileReport,
    LocatedError,
    StructuralError,
    SyntaxFailure,
    ValidationSummary,
)
from schemaline.parser.loader import DocumentError, DocumentLoader
from schemaline.parser.locator import PathLocator
from schemaline.validation.formatter import format_error

logger = logging.getLogger("schemaline.pipeline")

Classifier = Callable[[str], str | None]
DocumentValidator = Callable[[Any], list[StructuralError]]


class RootDirectoryError(Exception):
    """Raised when a root directory cannot be scanned at all."""

    def __init__(self, root: Path, reason: str) -> None:
        self.root = root
        super().__init__(f"Cannot scan root directory {root}: {reason}")


@dataclass
class _Tally:
    """Per-run accumulator; never shared between runs."""

    files_visited: int = 0
    files_validated: int = 0
    passed: int = 0
    failed: int = 0
    reports: list[FileReport] = field(default_factory=list)
    syntax_errors: list[SyntaxFailure] = field(default_factory=list)

    def record(self, report: FileReport) -> None:
        self.files_validated += 1
        if report.passed:
            self.passed += 1
        else:
            self.failed += 1
        self.reports.append(report)

    def summary(self) -> ValidationSummary:
        return ValidationSummary(
            files_visited=self.files_visited,
            files_validated=self.files_validated,
            passed=self.passed,
            failed=self.failed,
            reports=self.reports,
            syntax_errors=self.syntax_errors,
        )


class ValidationPipeline:
    """Validates every classified document below a set of root directories."""

    def __init__(
        self,
        loader: DocumentLoader | None = None,
        locator: PathLocator | None = None,
        extension: str = ".json",
    ) -> None:
        self._loader = loader or DocumentLoader()
        self._locator = locator or PathLocator()
        self._extension = extension

    def run(
        self,
        roots: Iterable[Path | str],
        classify: Classifier,
        validators: Mapping[str, DocumentValidator],
    ) -> ValidationSummary:
        """Validate all documents below ``roots``.

        Only a root that does not exist or cannot be listed is fatal
        (``RootDirectoryError``); every per-file problem ends up in the
        returned summary.
        """
        root_paths = [Path(r) for r in roots]
        for root in root_paths:
            self._check_root(root)

        tally = _Tally()
        for root in root_paths:
            logger.info("Validating documents under %s", root)
            for path in self._iter_documents(root):
                tally.files_visited += 1
                schema_type = self._classify(root, path, classify, validators)
                if schema_type is None:
                    failure = self._check_syntax(path)
                    if failure is not None:
                        tally.syntax_errors.append(failure)
                    continue
                tally.record(self.check_file(path, schema_type, validators[schema_type]))

        summary = tally.summary()
        logger.info(
            "Visited %d file(s), validated %d: %d passed, %d failed",
            summary.files_visited,
            summary.files_validated,
            summary.passed,
            summary.failed,
        )
        return summary

    def check_file(
        self, path: Path, schema_type: str, validator: DocumentValidator
    ) -> FileReport:
        """Read one document and validate it."""
        try:
            text = self._loader.read(path)
        except DocumentError as exc:
            return self._document_failure(str(path), schema_type, exc)
        return self.check_text(text, schema_type, validator, file_path=str(path))

    def check_text(
        self,
        text: str,
        schema_type: str,
        validator: DocumentValidator,
        file_path: str = "<string>",
    ) -> FileReport:
        """Parse and validate document text, locating every error."""
        try:
            document = self._loader.load_string(text, source=file_path)
        except DocumentError as exc:
            return self._document_failure(file_path, schema_type, exc)

        try:
            errors = validator(document.data)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Validator for %s crashed on %s: %s", schema_type, file_path, exc)
            error = StructuralError(message=f"Error validating file: {exc}")
            return FileReport(
                file_path=file_path,
                schema_type=schema_type,
                passed=False,
                errors=[LocatedError(error=error, rendered=format_error(error, None))],
            )

        located: list[LocatedError] = []
        for error in errors:
            location = self._locator.locate(document.text, error, document=document.data)
            located.append(
                LocatedError(
                    error=error, location=location, rendered=format_error(error, location)
                )
            )
        logger.debug("%s: %d error(s)", document.source, len(located))
        return FileReport(
            file_path=document.source,
            schema_type=schema_type,
            passed=not located,
            errors=located,
        )

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _check_root(root: Path) -> None:
        if not root.exists():
            raise RootDirectoryError(root, "does not exist")
        if not root.is_dir():
            raise RootDirectoryError(root, "not a directory")
        try:
            next(root.iterdir(), None)
        except OSError as exc:
            raise RootDirectoryError(root, str(exc)) from exc

    def _iter_documents(self, directory: Path) -> Iterator[Path]:
        """Depth-first walk in name order, so reports are stable across runs."""
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            logger.warning("Skipping unreadable directory %s: %s", directory, exc)
            return
        for entry in entries:
            if entry.is_dir() and not entry.is_symlink():
                yield from self._iter_documents(entry)
            elif entry.is_file() and entry.name.endswith(self._extension):
                yield entry

    @staticmethod
    def _classify(
        root: Path,
        path: Path,
        classify: Classifier,
        validators: Mapping[str, DocumentValidator],
    ) -> str | None:
        """First directory segment below ``root`` that maps to a validator."""
        for part in path.parent.relative_to(root).parts:
            schema_type = classify(part)
            if schema_type is None:
                continue
            if schema_type in validators:
                return schema_type
            logger.debug("No validator for schema type %r (%s)", schema_type, path)
        return None

    def _check_syntax(self, path: Path) -> SyntaxFailure | None:
        """Syntax-only check for documents no schema applies to."""
        try:
            self._loader.load(path)
        except DocumentError as exc:
            logger.debug("%s: %s", path, exc)
            return SyntaxFailure(file_path=str(path), error=_located(exc))
        return None

    @staticmethod
    def _document_failure(
        file_path: str, schema_type: str | None, exc: DocumentError
    ) -> FileReport:
        logger.debug("%s: %s", file_path, exc)
        return FileReport(
            file_path=file_path,
            schema_type=schema_type,
            passed=False,
            errors=[_located(exc)],
        )


def _located(exc: DocumentError) -> LocatedError:
    """A document-level failure placed at the parser's position."""
    error = StructuralError(message=str(exc))
    return LocatedError(
        error=error, location=exc.location, rendered=format_error(error, exc.location)
    )
