"""Unit tests for structure inference: shape classification and row extraction."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import sys

import pytest

from json_table_viewer.accessors import MISSING, get_cell_value
from json_table_viewer.inference import (
    ShapeKind,
    classify_shape,
    extract_headers,
    flatten_leaves,
    infer,
    longest_array_property,
)


class TestClassifyShape:

    @pytest.mark.parametrize(
        "value, expected",
        [
            ([], ShapeKind.EMPTY_ARRAY),
            ([{"a": 1}], ShapeKind.ARRAY_OF_OBJECTS),
            ([[1, 2]], ShapeKind.ARRAY_OF_ARRAYS),
            ([1, "x"], ShapeKind.ARRAY_OF_PRIMITIVES),
            ([None, {"a": 1}], ShapeKind.ARRAY_OF_PRIMITIVES),
            ({"rows": [1], "meta": {"x": 1}}, ShapeKind.OBJECT_WITH_ARRAYS),
            ({"meta": {"x": 1}, "name": "n"}, ShapeKind.NESTED_OBJECT),
            ({"a": 1, "b": "x"}, ShapeKind.FLAT_OBJECT),
            ({}, ShapeKind.FLAT_OBJECT),
            (42, ShapeKind.SCALAR),
            (None, ShapeKind.SCALAR),
        ],
    )
    def test_shapes(self, value, expected):
        assert classify_shape(value) is expected


class TestInferArrays:

    def test_union_of_keys(self):
        table = infer([{"a": 1}, {"b": 2}])
        assert table.headers == ["a", "b"]
        assert get_cell_value(table.rows[0], "b") is MISSING
        assert get_cell_value(table.rows[1], "a") is MISSING
        assert table.rows[1]["b"] == 2

    def test_rows_are_shallow(self):
        table = infer([{"a": {"b": 1}, "c": [1, 2]}])
        assert table.headers == ["a", "c"]
        assert table.rows[0]["a"] == {"b": 1}

    def test_empty_array(self):
        table = infer([])
        assert table.row_count == 0
        assert table.column_count == 0

    def test_array_of_arrays_ragged(self):
        table = infer([[1, 2, 3], [4]])
        assert table.headers == ["_rowIndex", "column_0", "column_1", "column_2"]
        assert table.rows[0] == {"_rowIndex": 0, "column_0": 1, "column_1": 2, "column_2": 3}
        assert table.rows[1] == {"_rowIndex": 1, "column_0": 4}

    def test_array_of_primitives(self):
        table = infer(["x", None, 3])
        assert table.rows == [
            {"index": 0, "value": "x"},
            {"index": 1, "value": None},
            {"index": 2, "value": 3},
        ]

    def test_stray_primitive_in_object_array(self):
        table = infer([{"a": 1}, 5])
        assert table.rows[1] == {"value": 5}
        assert table.headers == ["a", "value"]


class TestInferObjects:

    def test_wrapper_object_uses_array_property(self):
        table = infer({"users": [{"id": 1}], "settings": {"x": 1}})
        assert table.row_count == 1
        assert table.rows == [{"id": 1}]
        assert table.source_key == "users"

    def test_longest_array_wins(self):
        value = {"short": [1], "long": [{"a": 1}, {"a": 2}], "other": [3, 4]}
        assert longest_array_property(value) == "long"
        assert infer(value).row_count == 2

    def test_tie_goes_to_first_key(self):
        assert longest_array_property({"b": [1], "a": [2]}) == "b"

    def test_empty_longest_array(self):
        table = infer({"items": [], "name": "x"})
        assert table.shape is ShapeKind.OBJECT_WITH_ARRAYS
        assert table.row_count == 0

    def test_nested_object_flattens(self):
        table = infer({"name": "p", "inventory": {"stock": 5, "where": {"city": "Seoul"}}})
        assert table.row_count == 1
        assert table.rows[0] == {"name": "p", "inventory.stock": 5, "inventory.where.city": "Seoul"}

    def test_flatten_keeps_key_order(self):
        flat = flatten_leaves({"a": {"b": 1, "c": {"d": 2}}, "e": 3})
        assert list(flat) == ["a.b", "a.c.d", "e"]

    def test_flatten_beyond_recursion_limit(self):
        depth = sys.getrecursionlimit() + 2000
        value = {"leaf": 1}
        for _ in range(depth):
            value = {"k": value}
        table = infer(value)
        assert table.shape is ShapeKind.NESTED_OBJECT
        assert table.rows == [{"k." * depth + "leaf": 1}]

    def test_flatten_skips_empty_objects(self):
        assert flatten_leaves({"a": {}, "b": 1}) == {"b": 1}

    def test_flat_object_key_value_rows(self):
        table = infer({"title": "Doc", "published": True})
        assert table.headers == ["key", "value"]
        assert table.rows == [{"key": "title", "value": "Doc"}, {"key": "published", "value": True}]

    def test_empty_object(self):
        table = infer({})
        assert table.row_count == 0


class TestInferScalars:

    def test_number(self):
        assert infer(42).rows == [{"value": 42}]

    def test_null(self):
        assert infer(None).rows == [{"value": None}]


class TestExtractHeaders:

    def test_sorted(self):
        assert extract_headers([{"b": 1, "a": 2}, {"c": 3}]) == ["a", "b", "c"]
