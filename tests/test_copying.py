"""Unit tests for clipboard text helpers."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from json_table_viewer.accessors import MISSING
from json_table_viewer.copying import cell_copy_text, column_copy_text, row_copy_text

ROWS = [{"name": "Alice", "age": 30}, {"name": "Bob"}]


class TestCellCopy:

    def test_scalars(self):
        assert cell_copy_text("x") == "x"
        assert cell_copy_text(1.0) == "1"
        assert cell_copy_text(None) == "null"
        assert cell_copy_text(MISSING) == "null"

    def test_container_is_indented_json(self):
        assert cell_copy_text({"a": 1}) == '{\n  "a": 1\n}'


class TestRowCopy:

    def test_json(self):
        assert row_copy_text({"a": 1}) == '{\n  "a": 1\n}'

    def test_text(self):
        assert row_copy_text({"a": 1, "b": None, "c": [1]}, "text") == "a: 1\nb: null\nc: [1]"


class TestColumnCopy:

    def test_values(self):
        assert column_copy_text(ROWS, "age") == "30\nnull"

    def test_with_header(self):
        assert column_copy_text(ROWS, "name", include_header=True) == "name\nAlice\nBob"
