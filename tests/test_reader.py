"""Tests for AON decoding."""

from __future__ import annotations

import logging
import textwrap
from typing import Any

import pytest

from aon import AON, AONSchemaError, AONStructureError, Schema, SchemaField
from aon.reader import (
    decode_value,
    parse_document,
    parse_schema_line,
    split_commas,
    split_semicolons,
)

SCHEMAS = {
    "point": Schema("point", (SchemaField("x", "number"), SchemaField("y", "number"))),
}


class TestSplitting:
    def test_flat(self) -> None:
        assert split_commas("1, 2 ,3") == ["1", "2", "3"]

    def test_nested_groups_are_not_split(self) -> None:
        assert split_commas('1,(2,3),[4 ; (5,6)],"x"') == ["1", "(2,3)", "[4 ; (5,6)]", '"x"']
        assert split_semicolons("(1;2) ; [3;4] ; 5") == ["(1;2)", "[3;4]", "5"]

    def test_delimiters_inside_strings(self) -> None:
        assert split_commas('"a,b","c)d",1') == ['"a,b"', '"c)d"', "1"]
        assert split_semicolons('"a;b" ; "[c"') == ['"a;b"', '"[c"']

    def test_escaped_quotes_inside_strings(self) -> None:
        assert split_commas('"a\\",b",2') == ['"a\\",b"', "2"]

    def test_trailing_empty_part_dropped(self) -> None:
        assert split_commas("") == []
        assert split_commas("1,") == ["1"]
        assert split_commas(",1") == ["", "1"]


class TestDecodeValue:
    def test_null(self) -> None:
        for t in ("number", "string", "boolean", "point", "list<string>"):
            assert decode_value(t, "_", SCHEMAS) is None

    def test_boolean(self) -> None:
        assert decode_value("boolean", "true", {}) is True
        assert decode_value("boolean", "false", {}) is False
        # Anything but "true" is false.
        assert decode_value("boolean", "yes", {}) is False

    def test_number(self) -> None:
        assert decode_value("number", "42", {}) == 42
        assert isinstance(decode_value("number", "42", {}), int)
        assert decode_value("number", "-3.5", {}) == -3.5
        assert decode_value("number", "1e20", {}) == 1e20

    def test_unparsable_number_is_null(self) -> None:
        assert decode_value("number", "abc", {}) is None

    def test_string(self) -> None:
        assert decode_value("string", '"Alice"', {}) == "Alice"
        assert decode_value("string", "7000", {}) == "7000"
        assert decode_value("string", '"a\\nb"', {}) == "a\nb"
        assert decode_value("string", '"say \\"hi\\""', {}) == 'say "hi"'

    def test_string_with_invalid_escape_strips_quotes(self) -> None:
        assert decode_value("string", '"a\\qb"', {}) == "a\\qb"

    def test_list(self) -> None:
        assert decode_value("list<number>", "[1 ; 2 ; 3]", {}) == [1, 2, 3]
        assert decode_value("list<string>", '["a" ; 7]', {}) == ["a", "7"]
        assert decode_value("list<string>", "[]", {}) == []

    def test_list_without_brackets_is_empty(self) -> None:
        assert decode_value("list<number>", "1 ; 2", {}) == []

    def test_nested_list(self) -> None:
        assert decode_value("list<list<number>>", "[[1 ; 2] ; []]", {}) == [[1, 2], []]

    def test_schema_reference(self) -> None:
        assert decode_value("point", "(1,2)", SCHEMAS) == {"x": 1, "y": 2}
        assert decode_value("list<point>", "[(1,2) ; (3,4)]", SCHEMAS) == [
            {"x": 1, "y": 2},
            {"x": 3, "y": 4},
        ]

    def test_schema_reference_without_parens_is_null(self) -> None:
        assert decode_value("point", "1,2", SCHEMAS) is None

    def test_schema_reference_pairs_positionally(self) -> None:
        # Surplus parts are dropped and missing parts leave the field out.
        assert decode_value("point", "(1,2,3)", SCHEMAS) == {"x": 1, "y": 2}
        assert decode_value("point", "(1)", SCHEMAS) == {"x": 1}

    def test_unknown_type_decodes_as_string(self) -> None:
        assert decode_value("widget", "abc", {}) == "abc"
        assert decode_value("widget", '"abc"', {}) == "abc"


class TestHeader:
    def test_parse_schema_line(self) -> None:
        assert parse_schema_line("users:(id:number,tags:list<tags>)") == Schema(
            "users", (SchemaField("id", "number"), SchemaField("tags", "list<tags>"))
        )

    def test_parse_empty_schema_line(self) -> None:
        assert parse_schema_line("r:()") == Schema("r", ())

    def test_parse_schema_line_rejects_other_shapes(self) -> None:
        assert parse_schema_line("count:3") is None
        assert parse_schema_line(":(a:number)") is None
        assert parse_schema_line("r:(a:number") is None

    def test_parse_document(self) -> None:
        payload = textwrap.dedent(
            """\
            !aon
            count:2
            schemas:{
              r:(a:number,p:p)
              p:(x:string)
            }
            data:
            1,("u")

            2,_
            end
            ignored
            """
        )
        doc = parse_document(payload)
        assert doc.count == 2
        assert doc.root_name == "r"
        assert list(doc.schemas) == ["r", "p"]
        assert doc.rows == ['1,("u")', "2,_"]

    def test_crlf_line_endings(self) -> None:
        payload = "!aon\r\ncount:1\r\nschemas:{\r\n  r:(a:number)\r\n}\r\ndata:\r\n5\r\nend\r\n"
        assert AON.decode(payload) == {"a": 5}


class TestDecodeDocument:
    def test_example(self) -> None:
        payload = textwrap.dedent(
            """\
            !aon
            count:1
            schemas:{
              r:(a:number,b:string)
            }
            data:
            1,7000
            end
            """
        )
        assert AON.decode(payload) == {"a": 1, "b": "7000"}

    def test_single_row_unwrapped(self) -> None:
        encoded = AON.encode([{"name": "x", "tags": ["a", "b"]}], "item")
        assert AON.decode(encoded) == {"name": "x", "tags": ["a", "b"]}
        assert AON.decode(encoded, unwrap_single=False) == [{"name": "x", "tags": ["a", "b"]}]

    def test_zero_rows(self) -> None:
        payload = "!aon\ncount:0\nschemas:{\n  r:(a:number)\n}\ndata:\nend\n"
        assert AON.decode(payload) == []

    def test_missing_fields_decode_as_null(self, data_with_nulls: list[dict[str, Any]]) -> None:
        decoded = AON.decode(AON.encode(data_with_nulls, "nulls"))
        assert decoded == [
            {"id": 1, "name": "Alice", "role": None},
            {"id": 2, "name": "Bob", "role": None},
            {"id": 3, "name": None, "role": None},
        ]

    def test_scalar_lists_decode_as_strings(self) -> None:
        decoded = AON.decode(AON.encode({"nums": [1, 2]}, "r"))
        assert decoded == {"nums": ["1", "2"]}

    def test_row_width_mismatch(self) -> None:
        payload = textwrap.dedent(
            """\
            !aon
            count:1
            schemas:{
              r:(a:number,b:string)
            }
            data:
            1
            end
            """
        )
        with pytest.raises(AONStructureError, match="expected 2, got 1"):
            AON.decode(payload)

    def test_no_schemas(self) -> None:
        with pytest.raises(AONSchemaError, match="No schemas found"):
            AON.decode("!aon\ncount:1\ndata:\n1\nend\n")

    def test_count_mismatch_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        payload = "!aon\ncount:3\nschemas:{\n  r:(a:number)\n}\ndata:\n1\n2\nend\n"
        with caplog.at_level(logging.DEBUG, logger="aon.reader"):
            assert AON.decode(payload) == [{"a": 1}, {"a": 2}]
        assert "Header count 3 does not match 2 data rows" in caplog.text

    def test_matching_count_is_quiet(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="aon.reader"):
            AON.decode(AON.encode([{"a": 1}, {"a": 2}], "r"))
        assert "does not match" not in caplog.text

    def test_decode_is_idempotent(self, profile_data: list[dict[str, Any]]) -> None:
        encoded = AON.encode(profile_data, "users")
        assert AON.decode(encoded) == AON.decode(encoded)
