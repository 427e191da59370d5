"""Unit tests for dot-path helpers and cell lookup."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from json_table_viewer.accessors import MISSING, get_cell_value, is_absent
from json_table_viewer.paths import is_nested_path, join_path, split_path


class TestPaths:

    def test_join_with_empty_prefix(self):
        assert join_path("", "a") == "a"

    def test_join_nested(self):
        assert join_path("inventory", "stock") == "inventory.stock"

    def test_join_non_string_key(self):
        assert join_path("tags", 0) == "tags.0"

    def test_split(self):
        assert split_path("a.b.c") == ["a", "b", "c"]

    def test_split_empty(self):
        assert split_path("") == []
        assert split_path(None) == []

    def test_is_nested_path(self):
        assert is_nested_path("a.b")
        assert not is_nested_path("a")


class TestGetCellValue:

    def test_literal_key(self):
        assert get_cell_value({"inventory.stock": 5}, "inventory.stock") == 5

    def test_nested_walk(self):
        assert get_cell_value({"inventory": {"stock": 5}}, "inventory.stock") == 5

    def test_literal_key_wins(self):
        row = {"a.b": 1, "a": {"b": 2}}
        assert get_cell_value(row, "a.b") == 1

    def test_dotted_key_fallback(self):
        row = {"responses": {"gpt-3.5": {"score": 0.9}}}
        assert get_cell_value(row, "responses.gpt-3.5.score") == 0.9

    def test_missing_column(self):
        assert get_cell_value({"a": 1}, "b") is MISSING

    def test_missing_intermediate(self):
        assert get_cell_value({"a": {"x": 1}}, "a.b.c") is MISSING

    def test_scalar_intermediate(self):
        assert get_cell_value({"a": 1}, "a.b") is MISSING

    def test_null_is_not_missing(self):
        assert get_cell_value({"a": None}, "a") is None

    def test_non_mapping_row(self):
        assert get_cell_value([1, 2], "a") is MISSING


class TestAbsence:

    def test_missing_is_falsy(self):
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_is_absent(self):
        assert is_absent(None)
        assert is_absent(MISSING)
        assert not is_absent(0)
        assert not is_absent("")
