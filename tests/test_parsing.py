"""Unit tests for JSON parsing and parse-error classification."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from json_table_viewer.parsing import (
    NESTING_TOO_DEEP,
    ParseErrorKind,
    format_json_text,
    is_valid_json,
    parse_json_text,
)


class TestParseJsonText:

    def test_valid_input(self):
        result = parse_json_text('[{"a": 1}, {"b": 2}]')
        assert result.ok
        assert result.error is None
        assert result.row_count == 2
        assert result.column_count == 2

    def test_malformed_value_yields_no_rows(self):
        result = parse_json_text('{"a":}')
        assert not result.ok
        assert result.table is None
        assert result.row_count == 0
        assert result.error.kind is ParseErrorKind.MALFORMED_TOKEN
        assert result.error.position == 5

    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_empty_input(self, text):
        result = parse_json_text(text)
        assert result.error.kind is ParseErrorKind.EMPTY_INPUT

    @pytest.mark.parametrize("text", ['{"a": 1', "[1, 2", '{"a": [1, 2]   '])
    def test_truncated(self, text):
        assert parse_json_text(text).error.kind is ParseErrorKind.TRUNCATED_INPUT

    def test_unterminated_string(self):
        assert parse_json_text('{"a": "abc').error.kind is ParseErrorKind.MALFORMED_STRING

    @pytest.mark.parametrize("text", ['{"a": 01}', "[1.]", "[-]"])
    def test_malformed_number(self, text):
        assert parse_json_text(text).error.kind is ParseErrorKind.MALFORMED_NUMBER

    @pytest.mark.parametrize("text", ['{"a": undefined}', "{a: 1}", "[True]"])
    def test_invalid_identifier(self, text):
        assert parse_json_text(text).error.kind is ParseErrorKind.INVALID_IDENTIFIER

    @pytest.mark.parametrize("text", ["NaN", '{"a": Infinity}', "[-Infinity]"])
    def test_non_finite_constants_rejected(self, text):
        result = parse_json_text(text)
        assert not result.ok
        assert result.error.kind is ParseErrorKind.INVALID_IDENTIFIER

    def test_error_message_is_user_facing(self):
        error = parse_json_text('{"a": 1').error
        assert str(error) == error.message
        assert "incomplete" in error.message
        assert error.raw_message

    def test_scalar_document(self):
        result = parse_json_text("42")
        assert result.ok
        assert result.table.rows == [{"value": 42}]


class TestHelpers:

    def test_is_valid_json(self):
        assert is_valid_json('{"a": 1}')
        assert not is_valid_json('{"a":}')
        assert not is_valid_json(None)
        assert not is_valid_json("NaN")

    def test_format_json_text(self):
        assert format_json_text('{"a":[1,2]}') == '{\n  "a": [\n    1,\n    2\n  ]\n}'

    def test_format_keeps_unicode(self):
        assert format_json_text('["안녕"]') == '[\n  "안녕"\n]'

    def test_format_invalid_returns_input(self):
        assert format_json_text("{oops") == "{oops"


class TestDeepNesting:

    DEEP = "[" * 100000 + "]" * 100000

    def test_parse_reports_nesting_error(self):
        result = parse_json_text(self.DEEP)
        assert not result.ok
        assert result.error.kind is ParseErrorKind.GENERIC
        assert result.error.message == NESTING_TOO_DEEP
        assert result.table is None

    def test_helpers_do_not_raise(self):
        assert not is_valid_json(self.DEEP)
        assert format_json_text(self.DEEP) is self.DEEP
