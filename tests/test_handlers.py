"""Unit tests for the Gradio event handlers."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import os

from json_table_viewer.handlers import (
    clear_handler,
    column_type_handler,
    copy_column_handler,
    copy_row_handler,
    export_handler,
    format_json_handler,
    load_sample_handler,
    parse_text_handler,
    restore_handler,
    save_now_handler,
    search_handler,
    sort_handler,
    upload_file_handler,
)
from json_table_viewer.session import ViewerSession

DATA = '[{"name": "Alice", "age": 30}, {"name": "Bob", "age": 25}]'


class TestParseHandlers:

    def test_parse_text(self, session):
        out = parse_text_handler(session, DATA)
        assert len(out) == 5
        assert out[0] is session
        assert "<table" in out[1]
        assert out[2] == "2 rows • 2 columns"
        assert out[3] == "Loaded 2 rows and 2 columns."

    def test_parse_error(self, session):
        out = parse_text_handler(session, '{"a": 1')
        assert out[3].startswith("Error: ")
        assert "incomplete" in out[1]
        assert out[2] == ""

    def test_parse_too_deep(self, session):
        out = parse_text_handler(session, "[" * 100000 + "]" * 100000)
        assert out[3] == "Error: The JSON is nested too deeply to display."
        assert session.table is None

    def test_upload(self, session, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(DATA, encoding="utf-8")
        out = upload_file_handler(session, str(path))
        assert len(out) == 6
        assert out[5] == DATA

    def test_upload_unsupported(self, session, tmp_path):
        path = tmp_path / "data.xml"
        path.write_text("<a/>", encoding="utf-8")
        out = upload_file_handler(session, str(path))
        assert out[3].startswith("Error: Only JSON files")

    def test_upload_nothing(self, session):
        assert upload_file_handler(session, None)[3] == "No file uploaded."

    def test_format_json(self):
        assert format_json_handler('{"a":1}') == ('{\n  "a": 1\n}', "Formatted.")
        assert format_json_handler("{bad")[1].startswith("Error")
        assert format_json_handler("")[1] == "Nothing to format."

    def test_load_sample(self, session):
        out = load_sample_handler(session, "simple_array")
        assert out[3].startswith("Sample 'Simple array'")
        assert '"John Doe"' in out[5]


class TestViewHandlers:

    def test_sort(self, session):
        parse_text_handler(session, DATA)
        out = sort_handler(session, "age", "Ascending")
        assert out[3] == "Sorted by 'age' (asc)."
        assert session.plan.row_indices == [1, 0]

    def test_sort_without_data(self, session):
        assert sort_handler(session, "age")[3] == "Load data before sorting."

    def test_search(self, session):
        parse_text_handler(session, DATA)
        assert search_handler(session, "bob")[2] == "1 of 2 rows • 2 columns"

    def test_column_type(self, session):
        parse_text_handler(session, DATA)
        column_type_handler(session, "age", "number-hex")
        assert session.plan.rows[0].cells["age"].text == "0x1E"

    def test_column_type_requires_column(self, session):
        assert column_type_handler(session, "", "raw")[3] == "Select a column first."

    def test_clear(self, session):
        parse_text_handler(session, DATA)
        out = clear_handler(session)
        assert out[3] == "Cleared."
        assert out[5:] == ("", "")
        assert session.table is None


class TestOutputHandlers:

    def test_export(self, session):
        parse_text_handler(session, DATA)
        path, status = export_handler(session, "JSON", "handler_export_test")
        try:
            assert path.endswith("handler_export_test.json")
            assert status == "Exported 2 rows."
        finally:
            os.remove(path)

    def test_export_without_data(self):
        assert export_handler(None, "CSV", "") == (None, "Nothing to export.")

    def test_copy_column(self, session):
        parse_text_handler(session, DATA)
        sort_handler(session, "age", "Ascending")
        assert copy_column_handler(session, "name", True) == "name\nBob\nAlice"

    def test_copy_row(self, session):
        parse_text_handler(session, DATA)
        assert copy_row_handler(session, 2, "Text") == "name: Bob\nage: 25"
        assert copy_row_handler(session, 5, "JSON") == ""


class TestPersistenceHandlers:

    def test_save_and_restore(self, session, store):
        parse_text_handler(session, DATA)
        search_handler(session, "bob")
        assert save_now_handler(session) == (session, "Saved.")

        out = restore_handler(ViewerSession(store=store))
        assert out[3] == "Restored previous session."
        assert out[5] == DATA
        assert out[6] == "bob"
