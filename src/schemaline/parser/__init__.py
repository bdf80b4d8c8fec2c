"""JSON loading and source location lookup for schemaline."""

from schemaline.parser.loader import DocumentLoader, LoadedDocument
from schemaline.parser.locator import PathLocator
from schemaline.parser.scanner import ScanEvent, ScanState, TokenScanner
from schemaline.parser.walker import NOT_FOUND, resolved_depth, walk

__all__ = [
    "NOT_FOUND",
    "DocumentLoader",
    "LoadedDocument",
    "PathLocator",
    "ScanEvent",
    "ScanState",
    "TokenScanner",
    "resolved_depth",
    "walk",
]
