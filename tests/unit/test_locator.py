"""Tests for mapping structural paths to source locations."""

from __future__ import annotations

import json

import pytest

from schemaline.models.errors import SourceLocation, StructuralError, parse_pointer
from schemaline.parser.locator import PathLocator
from tests.conftest import INVALID_WORKFLOW, NAME_ON_LINE_5, VALID_WORKFLOW

TRAILING_COMMA = """\
{
  "key": "x",
  "states": [
    {
      "key": "a"
    },
    {
      "key": "b",
    }
  ]
}
"""

REPEATED_KEY = """\
{
  "meta": {
    "name": "inner"
  },
  "name": "outer"
}
"""


class TestStructuralResolution:
    def test_single_line_array_element(self, locator: PathLocator) -> None:
        text = '{"a": {"b": [1,2,3]}}'
        location = locator.resolve(text, ("a", "b", "1"))
        assert location == SourceLocation(line=1, column=16)

    def test_top_level_key(self, locator: PathLocator) -> None:
        assert locator.resolve(VALID_WORKFLOW, ("version",)) == SourceLocation(line=3, column=3)

    def test_nested_key_inside_arrays(self, locator: PathLocator) -> None:
        path = parse_pointer("/attributes/states/0/transitions/0/target")
        assert locator.resolve(INVALID_WORKFLOW, path) == SourceLocation(line=11, column=13)

    def test_array_element_opening(self, locator: PathLocator) -> None:
        path = parse_pointer("/attributes/states/1")
        assert locator.resolve(VALID_WORKFLOW, path) == SourceLocation(line=14, column=7)

    def test_empty_array_value(self, locator: PathLocator) -> None:
        path = ("attributes", "states", 1, "transitions")
        assert locator.resolve(VALID_WORKFLOW, path) == SourceLocation(line=16, column=9)

    def test_scalar_elements_are_counted(self, locator: PathLocator) -> None:
        text = '{\n  "xs": [\n    "a",\n    true,\n    null\n  ]\n}'
        assert locator.resolve(text, ("xs", 2)) == SourceLocation(line=5, column=5)

    def test_root_array(self, locator: PathLocator) -> None:
        text = "[\n  {\"k\": 1},\n  {\"k\": 2}\n]"
        assert locator.resolve(text, (1, "k")) == SourceLocation(line=3, column=4)

    def test_escaped_key(self, locator: PathLocator) -> None:
        text = '{\n  "say \\"hi\\"": 1\n}'
        assert locator.resolve(text, ('say "hi"',)) == SourceLocation(line=2, column=3)

    def test_repeated_key_resolves_at_matching_depth(self, locator: PathLocator) -> None:
        # "name" also appears one level deeper on line 3
        assert locator.resolve(REPEATED_KEY, ("name",)) == SourceLocation(line=5, column=3)
        assert locator.resolve(REPEATED_KEY, ("meta", "name")) == SourceLocation(
            line=3, column=5
        )

    def test_accepts_pre_parsed_document(self, locator: PathLocator) -> None:
        document = json.loads(VALID_WORKFLOW)
        location = locator.resolve(VALID_WORKFLOW, ("key",), document=document)
        assert location == SourceLocation(line=2, column=3)

    def test_resolved_line_contains_last_step(self, locator: PathLocator) -> None:
        lines = VALID_WORKFLOW.split("\n")
        for path, token in [
            (("attributes",), '"attributes"'),
            (("attributes", "states"), '"states"'),
            (("attributes", "states", 0, "key"), '"key"'),
            (("attributes", "states", 0, "transitions", 0), "{"),
            (("attributes", "states", 1, "key"), '"key"'),
        ]:
            location = locator.resolve(VALID_WORKFLOW, path)
            assert location is not None
            assert token in lines[location.line - 1]


class TestRootLevelFallback:
    def test_empty_path_without_property(self, locator: PathLocator) -> None:
        assert locator.resolve(VALID_WORKFLOW, ()) is None

    def test_additional_property_at_root(self, locator: PathLocator) -> None:
        location = locator.resolve(INVALID_WORKFLOW, (), named_property="owner")
        assert location == SourceLocation(line=4)

    def test_named_property_first_occurrence(self, locator: PathLocator) -> None:
        error = StructuralError.from_raw(
            "", "must have required property 'name'", {"missingProperty": "name"}
        )
        assert locator.locate(NAME_ON_LINE_5, error) == SourceLocation(line=5)

    def test_named_property_absent(self, locator: PathLocator) -> None:
        assert locator.resolve(VALID_WORKFLOW, (), named_property="nope") is None


class TestTextSearchFallback:
    def test_malformed_document_index_step(self, locator: PathLocator) -> None:
        assert locator.resolve(TRAILING_COMMA, ("states", 1)) == SourceLocation(line=7)

    def test_malformed_document_colon_on_its_own_line(self, locator: PathLocator) -> None:
        text = '{\n  "xs"\n  :\n  [\n    {"a": 1},\n    {"b": 2},\n  ]\n}'
        assert locator.resolve(text, ("xs", 1)) == SourceLocation(line=6)
        assert locator.resolve(text, ("xs", 0)) == SourceLocation(line=5)

    def test_malformed_document_property_step(self, locator: PathLocator) -> None:
        # best effort: first "key": in the text
        assert locator.resolve(TRAILING_COMMA, ("states", 1, "key")) == SourceLocation(line=2)

    def test_malformed_document_index_past_end(self, locator: PathLocator) -> None:
        # falls back to the array's own key
        assert locator.resolve(TRAILING_COMMA, ("states", 5)) == SourceLocation(line=3)

    def test_missing_path_falls_back_to_existing_ancestor(self, locator: PathLocator) -> None:
        location = locator.resolve(VALID_WORKFLOW, ("attributes", "missing"))
        assert location == SourceLocation(line=4, column=3)

    def test_missing_key_found_elsewhere_in_text(self, locator: PathLocator) -> None:
        # "version" is not under "attributes", but the text search still finds it
        location = locator.resolve(VALID_WORKFLOW, ("attributes", "version"))
        assert location == SourceLocation(line=3)


class TestTotality:
    @pytest.mark.parametrize(
        "text",
        ["", "not json {{{ ]]]", "}}}]]]", '"unterminated', "[" * 5000, "42", "null"],
    )
    @pytest.mark.parametrize(
        "pointer", ["", "/a", "/0", "/a/0/b", "/~1/~0"]
    )
    def test_never_raises(self, locator: PathLocator, text: str, pointer: str) -> None:
        location = locator.resolve(text, parse_pointer(pointer), named_property="a")
        assert location is None or isinstance(location, SourceLocation)

    def test_unknown_path_in_scalar_document(self, locator: PathLocator) -> None:
        assert locator.resolve("42", ("a",)) is None
