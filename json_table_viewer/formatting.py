"""Cell presentation: raw-type classification and per-display-type formatting.

Every formatter falls back to the value's plain text form when a conversion
does not apply, and `format_cell` contains unexpected failures so one bad
cell never aborts the rest of a render.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from dateutil import parser as dateparser

from .accessors import MISSING
from .display_types import ColumnDisplayType

logger = logging.getLogger(__name__)

MAX_RENDER_DEPTH = 5

SECONDS_TIMESTAMP_RANGE = (1e9, 1e10)
MILLIS_TIMESTAMP_RANGE = (1e12, 1e13)
SECONDS_PER_DAY = 86400

DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'
DATE_FORMAT = '%Y-%m-%d'


def raw_type(value: Any) -> str:
    """One of string, number, boolean, null, absent, array, object."""
    if value is MISSING:
        return 'absent'
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    return 'string'


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def number_text(value) -> str:
    if isinstance(value, float) and is_integral(value) and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def text_form(value: Any) -> str:
    """Plain string form of a cell value, as used for search, copy and fallbacks."""
    kind = raw_type(value)
    if kind in ('null', 'absent'):
        return 'null'
    if kind == 'boolean':
        return 'true' if value else 'false'
    if kind == 'number':
        return number_text(value)
    if kind in ('array', 'object'):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def is_finite(value) -> bool:
    return isinstance(value, int) or math.isfinite(value)


def format_number(value) -> str:
    """Thousands grouping, at most two fractional digits."""
    if not is_finite(value):
        return str(value)
    if is_integral(value):
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip('0').rstrip('.')


def summarize(value: Any) -> str:
    if isinstance(value, dict):
        return f"{{{len(value)} properties}}"
    return f"[{len(value)} items]"


def clock_text(seconds) -> str:
    seconds = int(math.floor(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _utc_from_millis(millis) -> datetime:
    return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)


def format_as_time(value: Any) -> str:
    """Read a number as a Unix timestamp, choosing the unit by magnitude."""
    if not is_number(value) or not is_finite(value) or value < 0:
        return text_form(value)

    if SECONDS_TIMESTAMP_RANGE[0] <= value < SECONDS_TIMESTAMP_RANGE[1]:
        millis = value * 1000
    elif MILLIS_TIMESTAMP_RANGE[0] <= value < MILLIS_TIMESTAMP_RANGE[1]:
        millis = value
    elif 0 < value < SECONDS_PER_DAY:
        return clock_text(value)
    else:
        millis = value

    try:
        return _utc_from_millis(millis).strftime(DATETIME_FORMAT)
    except (OverflowError, OSError, ValueError):
        return text_form(value)


def _radix(value: Any, prefix: str, fmt: str) -> str:
    if not is_integral(value):
        return text_form(value)
    number = int(value)
    sign = '-' if number < 0 else ''
    return f"{sign}{prefix}{abs(number):{fmt}}"


def format_as_hex(value: Any) -> str:
    return _radix(value, '0x', 'X')


def format_as_binary(value: Any) -> str:
    return _radix(value, '0b', 'b')


def parse_date_string(text: str) -> Optional[datetime]:
    text = text.strip()
    if not text:
        return None
    try:
        return dateparser.isoparse(text)
    except (ValueError, OverflowError):
        pass
    try:
        return dateparser.parse(text)
    except (ValueError, OverflowError):
        return None


def format_as_date(value: Any) -> str:
    """Numbers are epoch milliseconds; strings are ISO or free-form dates."""
    if is_number(value):
        try:
            return _utc_from_millis(value).strftime(DATE_FORMAT)
        except (OverflowError, OSError, ValueError):
            return text_form(value)
    if isinstance(value, str):
        parsed = parse_date_string(value)
        if parsed is not None:
            return parsed.strftime(DATE_FORMAT)
    return text_form(value)


def format_as_boolean(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return text_form(value)


def format_as_number(value: Any) -> str:
    if is_number(value):
        return format_number(value)
    return text_form(value)


def format_as_raw(value: Any) -> str:
    """The value unformatted: strings unquoted, no digit grouping, containers as full JSON text."""
    return text_form(value)


def format_auto(value: Any) -> str:
    kind = raw_type(value)
    if kind == 'number':
        return format_number(value)
    if kind in ('array', 'object'):
        return summarize(value)
    return text_form(value)


def format_as_json(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return summarize(value)
    if value is MISSING:
        return 'null'
    return json.dumps(value, ensure_ascii=False)


FORMATTERS: Dict[ColumnDisplayType, Callable[[Any], str]] = {
    ColumnDisplayType.AUTO: format_auto,
    ColumnDisplayType.STRING: text_form,
    ColumnDisplayType.NUMBER: format_as_number,
    ColumnDisplayType.NUMBER_TIME: format_as_time,
    ColumnDisplayType.NUMBER_HEX: format_as_hex,
    ColumnDisplayType.NUMBER_BINARY: format_as_binary,
    ColumnDisplayType.BOOLEAN: format_as_boolean,
    ColumnDisplayType.JSON: format_as_json,
    ColumnDisplayType.DATE: format_as_date,
    ColumnDisplayType.RAW: format_as_raw,
}

EXPANDABLE_TYPES = (ColumnDisplayType.AUTO, ColumnDisplayType.JSON)


@dataclass
class NestedTable:
    """Key/value (object) or index/value (array) sub-table of an expanded cell."""

    kind: str
    entries: List[Tuple[str, "CellView"]]

    @property
    def key_label(self) -> str:
        return 'Key' if self.kind == 'object' else 'Index'


@dataclass
class CellView:
    text: str
    data_type: str
    display_type: ColumnDisplayType = ColumnDisplayType.AUTO
    value: Any = None
    depth: int = 0
    numeric: bool = False

    @property
    def expandable(self) -> bool:
        return (
            self.display_type in EXPANDABLE_TYPES
            and self.data_type in ('array', 'object')
            and self.depth < MAX_RENDER_DEPTH
        )

    @property
    def tooltip(self) -> str:
        return text_form(self.value)

    def expand(self) -> Optional[NestedTable]:
        """Sub-table for an object or array cell, one level deeper."""
        if not self.expandable:
            return None
        return expand_value(self.value, self.depth + 1)


def render_value(value: Any, depth: int = 0) -> CellView:
    """Auto-format ``value`` at nesting ``depth``; containers at the depth cap become JSON text."""
    kind = raw_type(value)
    if kind in ('array', 'object') and depth >= MAX_RENDER_DEPTH:
        text = json.dumps(value, indent=2, ensure_ascii=False)
    else:
        text = format_auto(value)
    return CellView(text=text, data_type=kind, value=value, depth=depth, numeric=(kind == 'number'))


def expand_value(value: Any, depth: int) -> NestedTable:
    if isinstance(value, dict):
        return NestedTable('object', [(str(k), render_value(v, depth)) for k, v in value.items()])
    return NestedTable('array', [(str(i), render_value(v, depth)) for i, v in enumerate(value)])


def format_cell(value: Any, display_type=ColumnDisplayType.AUTO) -> CellView:
    """Format one cell for ``display_type``; never raises."""
    display_type = ColumnDisplayType.parse(display_type)
    kind = raw_type(value)
    numeric = display_type.is_numeric or (display_type is ColumnDisplayType.AUTO and kind == 'number')
    try:
        text = FORMATTERS[display_type](value)
    except Exception as e:  # pylint: disable=broad-except
        logger.warning("Formatting %s as %s failed: %s", kind, display_type.value, e)
        text = text_form(value)
    return CellView(text=text, data_type=kind, display_type=display_type, value=value, numeric=numeric)
