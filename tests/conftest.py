"""Shared test fixtures for schemaline."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from schemaline.parser.loader import DocumentLoader
from schemaline.parser.locator import PathLocator
from schemaline.validation.pipeline import ValidationPipeline
from schemaline.validation.registry import SchemaRegistry

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCHEMAS_DIR = FIXTURES_DIR / "schemas"


@pytest.fixture
def locator() -> PathLocator:
    return PathLocator()


@pytest.fixture
def loader() -> DocumentLoader:
    return DocumentLoader()


@pytest.fixture
def registry() -> SchemaRegistry:
    """Registry with the fixture workflow/task schemas loaded."""
    reg = SchemaRegistry()
    reg.load_directory(SCHEMAS_DIR)
    return reg


@pytest.fixture
def pipeline() -> ValidationPipeline:
    return ValidationPipeline()


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Create ``{relative path: text}`` files below a fresh domain root."""

    def _write(files: dict[str, str]) -> Path:
        root = tmp_path / "domain"
        root.mkdir(exist_ok=True)
        for rel, text in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        return root

    return _write


# Line numbers matter in these documents; keep them byte-exact.

VALID_WORKFLOW = """\
{
  "key": "order-flow",
  "version": "1.0.0",
  "attributes": {
    "states": [
      {
        "key": "draft",
        "transitions": [
          {
            "target": "review"
          }
        ]
      },
      {
        "key": "review",
        "transitions": []
      }
    ]
  }
}
"""

# Errors:
#   line 3   /version does not match the version pattern
#   line 4   "owner" is not an allowed property
#   line 11  /attributes/states/0/transitions/0/target is not a string
#   line 15  /attributes/states/1 lacks "key"
INVALID_WORKFLOW = """\
{
  "key": "order-flow",
  "version": "one",
  "owner": "team-a",
  "attributes": {
    "states": [
      {
        "key": "draft",
        "transitions": [
          {
            "target": 42
          }
        ]
      },
      {
        "transitions": []
      }
    ]
  }
}
"""

VALID_TASK = json.dumps({"key": "fetch-order", "type": "http", "timeout": 30}, indent=2)

# "k10" lacks its colon on line 12
MALFORMED_AT_LINE_12 = (
    "{\n" + "".join(f'  "k{i}": {i},\n' for i in range(10)) + '  "k10" 10\n}\n'
)

# first '"name":' in the text is on line 5, nested under meta/owner
NAME_ON_LINE_5 = """\
{
  "title": "x",
  "meta": {
    "owner": {
      "name": "a"
    }
  }
}
"""
