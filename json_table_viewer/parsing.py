from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .inference import Table, infer

logger = logging.getLogger(__name__)


class ParseErrorKind(str, Enum):
    EMPTY_INPUT = 'empty-input'
    MALFORMED_TOKEN = 'malformed-token'
    TRUNCATED_INPUT = 'truncated-input'
    MALFORMED_STRING = 'malformed-string'
    MALFORMED_NUMBER = 'malformed-number'
    INVALID_IDENTIFIER = 'invalid-identifier'
    GENERIC = 'generic'


ERROR_MESSAGES = {
    ParseErrorKind.EMPTY_INPUT: "No JSON data was entered.",
    ParseErrorKind.MALFORMED_TOKEN: "The JSON is malformed. Check the syntax near the reported position.",
    ParseErrorKind.TRUNCATED_INPUT: "The JSON is incomplete. Check for missing closing brackets or quotes.",
    ParseErrorKind.MALFORMED_STRING: "A string is malformed. Check its quotes and escape sequences.",
    ParseErrorKind.MALFORMED_NUMBER: "A number is malformed.",
    ParseErrorKind.INVALID_IDENTIFIER: "An unquoted word or reserved identifier was used.",
}
NESTING_TOO_DEEP = "The JSON is nested too deeply to display."

_STRING_ERRORS = ('Unterminated string', 'Invalid control character', 'Invalid \\escape', 'Invalid \\u')
_NUMBER_CHARS = set('0123456789+-.eE')


class _ConstantRejected(ValueError):
    pass


@dataclass
class ParseError:
    kind: ParseErrorKind
    message: str
    raw_message: str = ''
    position: Optional[int] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class ParseResult:
    """Outcome of `parse_json_text`: either ``value``/``table`` or ``error``."""

    ok: bool
    value: Any = None
    table: Optional[Table] = None
    error: Optional[ParseError] = None

    @property
    def row_count(self) -> int:
        return self.table.row_count if self.table is not None else 0

    @property
    def column_count(self) -> int:
        return self.table.column_count if self.table is not None else 0


def _reject_constant(name: str):
    raise _ConstantRejected(f"Unexpected identifier '{name}'")


def loads_strict(text: str) -> Any:
    """`json.loads` that refuses the NaN/Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def classify_decode_error(err: json.JSONDecodeError) -> ParseErrorKind:
    """Map a decoder message and position onto a user-facing error kind."""
    msg = err.msg
    doc = err.doc or ''
    pos = err.pos

    if any(msg.startswith(prefix) for prefix in _STRING_ERRORS):
        return ParseErrorKind.MALFORMED_STRING
    if pos >= len(doc.rstrip()):
        return ParseErrorKind.TRUNCATED_INPUT

    ch = doc[pos]
    prev = doc[pos - 1] if pos > 0 else ''
    if not (msg.startswith('Expecting') or msg.startswith('Extra data')):
        return ParseErrorKind.GENERIC
    # A number the scanner stopped reading part-way through, e.g. '01' or '1e'.
    if ch in _NUMBER_CHARS and prev.isdigit():
        return ParseErrorKind.MALFORMED_NUMBER
    if ch.isalpha() or ch == '_':
        return ParseErrorKind.INVALID_IDENTIFIER
    if msg.startswith('Expecting value') and ch in '+-.':
        return ParseErrorKind.MALFORMED_NUMBER
    return ParseErrorKind.MALFORMED_TOKEN


def build_parse_error(exc: Exception) -> ParseError:
    if isinstance(exc, RecursionError):
        return ParseError(kind=ParseErrorKind.GENERIC, message=NESTING_TOO_DEEP, raw_message=str(exc))
    if isinstance(exc, json.JSONDecodeError):
        kind = classify_decode_error(exc)
        raw = str(exc)
        position = exc.pos
    elif isinstance(exc, _ConstantRejected):
        kind = ParseErrorKind.INVALID_IDENTIFIER
        raw = str(exc)
        position = None
    else:
        kind = ParseErrorKind.GENERIC
        raw = str(exc)
        position = None
    message = ERROR_MESSAGES.get(kind, f"JSON parse error: {raw}")
    return ParseError(kind=kind, message=message, raw_message=raw, position=position)


def parse_json_text(text: Optional[str]) -> ParseResult:
    """Parse raw text and infer its table; failures come back as a classified `ParseError`."""
    if text is None or not text.strip():
        kind = ParseErrorKind.EMPTY_INPUT
        return ParseResult(ok=False, error=ParseError(kind=kind, message=ERROR_MESSAGES[kind]))

    try:
        value = loads_strict(text)
    except (ValueError, RecursionError) as e:
        error = build_parse_error(e)
        logger.info("JSON parse failed (%s): %s", error.kind.value, error.raw_message)
        return ParseResult(ok=False, error=error)

    table = infer(value)
    logger.info("Parsed JSON: %d rows, %d columns", table.row_count, table.column_count)
    return ParseResult(ok=True, value=value, table=table)


def is_valid_json(text: Optional[str]) -> bool:
    if text is None:
        return False
    try:
        loads_strict(text)
    except (ValueError, RecursionError):
        return False
    return True


def format_json_text(text: str, indent: int = 2) -> str:
    """Pretty-print ``text``; invalid input comes back unchanged."""
    try:
        return json.dumps(loads_strict(text), indent=indent, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return text
