from pathlib import Path

import pytest

from request_planner.errors import QueryParseError
from request_planner.parser.base import LiteralValue, MapValue, Reference, SequenceValue
from request_planner.parser.query import parse_queries, parse_query, parse_query_data, parse_value

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseValue:
    def test_dotted_reference(self):
        node = parse_value("$user.address.city")
        assert isinstance(node, Reference)
        assert node.path == ["user", "address", "city"]

    def test_digit_segments_become_indexes(self):
        node = parse_value("$users.0.id")
        assert node.path == ["users", 0, "id"]

    def test_explicit_ref_keeps_segments(self):
        node = parse_value({"$ref": ["auth", "headers", "X-Token"]})
        assert isinstance(node, Reference)
        assert node.is_header is True

    def test_escaped_dollar_is_literal(self):
        node = parse_value("$$price")
        assert isinstance(node, LiteralValue)
        assert node.value == "$price"

    def test_list_of_strings_is_a_sequence(self):
        node = parse_value(["user", "id"])
        assert isinstance(node, SequenceValue)
        assert node.to_plain() == ["user", "id"]

    def test_map(self):
        node = parse_value({"a": 1, "b": "$user.id"})
        assert isinstance(node, MapValue)
        assert isinstance(node.entries["b"], Reference)

    def test_annotation_wrapper(self):
        node = parse_value({"$value": [1, 2], "$expand": False, "$meta": {"encoder": "json"}})
        assert isinstance(node, SequenceValue)
        assert node.expandable is False
        assert node.metadata == {"encoder": "json"}

    def test_annotated_reference(self):
        node = parse_value({"$value": "$users.id", "$expand": False})
        assert isinstance(node, Reference)
        assert node.expandable is False

    def test_empty_segment_rejected(self):
        with pytest.raises(QueryParseError):
            parse_value("$user..id")

    def test_ref_must_start_with_entity_name(self):
        with pytest.raises(QueryParseError):
            parse_value({"$ref": []})


class TestParseQueryData:
    def test_full_item(self):
        item = parse_query_data({
            "name": "profile",
            "resource": "users",
            "parameters": {"id": "$user.id"},
            "headers": {"X-Session": "$user.headers.X-Session", "Accept": "application/json"},
            "timeout": 1000,
            "metadata": {"ignore-errors": True},
        })
        assert item.name == "profile"
        assert isinstance(item.parameters["id"], Reference)
        assert isinstance(item.headers["X-Session"], Reference)
        assert item.headers["Accept"] == "application/json"
        assert item.timeout == 1000
        assert item.metadata == {"ignore-errors": True}

    def test_missing_name(self):
        with pytest.raises(QueryParseError):
            parse_query_data({"resource": "users"})

    def test_missing_resource_and_url(self):
        with pytest.raises(QueryParseError):
            parse_query_data({"name": "x"})

    def test_not_a_mapping(self):
        with pytest.raises(QueryParseError):
            parse_query_data(["name", "x"])


class TestParseFiles:
    def test_parse_queries_from_mapping(self):
        items = parse_queries(FIXTURES / "queries.yaml")
        assert [i.name for i in items] == ["profile", "orders", "secrets"]

    def test_parse_queries_from_list(self):
        items = parse_queries(FIXTURES / "ambiguous.yaml")
        assert len(items) == 1
        assert items[0].name == "broken"

    def test_parse_single_query(self, tmp_path):
        f = tmp_path / "q.json"
        f.write_text('{"name": "raw", "url": "http://example.com/items/:id", "parameters": {"id": 7}}')
        item = parse_query(f)
        assert item.is_forced_url is True
        assert item.parameters["id"].value == 7

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("name: [broken\n")
        with pytest.raises(QueryParseError):
            parse_query(f)
