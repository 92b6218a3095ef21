import pytest

from request_planner.errors import ExpansionError
from request_planner.parser.query import parse_query_data
from request_planner.planner.expansion import choose_source, distinct_bodies, get_expansion_sources
from request_planner.state import ResolvedState, ResponseRecord

USERS = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]


def _state() -> ResolvedState:
    return ResolvedState(done=[
        ("user", ResponseRecord(status=200, body={"id": 42, "tags": ["x", "y"]})),
        ("users", ResponseRecord(status=200, body=USERS)),
        ("products", ResponseRecord(status=200, body=[{"sku": "p1"}])),
    ])


def _item(parameters):
    return parse_query_data({"name": "q", "resource": "things", "parameters": parameters})


class TestExpansionSources:
    def test_single_valued_reference_is_not_a_source(self):
        assert get_expansion_sources(_item({"id": "$user.id"}), _state()) == []

    def test_reference_into_list(self):
        sources = get_expansion_sources(_item({"id": "$users.id"}), _state())
        assert len(sources) == 1
        assert sources[0].kind == "reference"
        assert sources[0].fullpath == ["users", "id"]
        assert sources[0].path == ["id"]
        assert sources[0].items == USERS

    def test_reference_to_list_value(self):
        sources = get_expansion_sources(_item({"tag": "$user.tags"}), _state())
        assert sources[0].items == ["x", "y"]
        assert sources[0].path == []

    def test_literal_sequence(self):
        sources = get_expansion_sources(_item({"user_id": [1, 2, 3]}), _state())
        assert len(sources) == 1
        assert sources[0].kind == "literal"
        assert sources[0].node.to_plain() == [1, 2, 3]

    def test_non_expandable_literal_and_reference_skipped(self):
        item = _item({
            "ids": {"$value": [1, 2], "$expand": False},
            "uids": {"$value": "$users.id", "$expand": False},
        })
        assert get_expansion_sources(item, _state()) == []

    def test_header_reference_never_expands(self):
        state = ResolvedState(done=[("auth", ResponseRecord(status=200, headers={"X-Ids": ["1", "2"]}))])
        assert get_expansion_sources(_item({"ids": "$auth.headers.X-Ids"}), state) == []

    def test_absent_entity_is_not_a_source(self):
        assert get_expansion_sources(_item({"id": "$ghost.id"}), _state()) == []


class TestDistinctSources:
    def test_repeated_reference_counts_once(self):
        sources = get_expansion_sources(_item({"a": "$users.id", "b": "$users.id"}), _state())
        assert len(distinct_bodies(sources)) == 1

    def test_two_paths_into_same_list_count_once(self):
        sources = get_expansion_sources(_item({"a": "$users.id", "b": "$users.name"}), _state())
        assert len(sources) == 2
        assert len(distinct_bodies(sources)) == 1

    def test_equal_literals_count_once(self):
        sources = get_expansion_sources(_item({"a": [1, 2], "b": [1, 2]}), _state())
        assert len(distinct_bodies(sources)) == 1

    def test_independent_lists(self):
        sources = get_expansion_sources(_item({"a": "$users.id", "b": "$products.sku"}), _state())
        assert len(distinct_bodies(sources)) == 2


class TestChooseSource:
    def test_no_source(self):
        assert choose_source([]) is None

    def test_single_source(self):
        sources = get_expansion_sources(_item({"a": "$users.id"}), _state())
        assert choose_source(sources) is sources[0]

    def test_two_sources_is_an_error(self):
        sources = get_expansion_sources(_item({"a": "$users.id", "b": [1, 2]}), _state())
        with pytest.raises(ExpansionError) as exc:
            choose_source(sources)
        assert exc.value.error_type == "expansion-error"
