"""Column width estimation for rendered tables of unknown, mixed-script content.

Widths are computed from the realized display text (header plus a bounded
sample of formatted cells), so this runs after a render has materialized its
cells. Pixel weights are per character, keyed on Unicode range.
"""
from __future__ import annotations

import math
import re
import unicodedata
from typing import Dict, Iterable, Mapping, Optional, Sequence

from .config import DEFAULT_SETTINGS, NUMERIC_HEADER_KEYWORDS, TableSettings

WIDE_CHAR_WIDTH = 14
ASCII_CHAR_WIDTH = 8
OTHER_CHAR_WIDTH = 12
MIN_TEXT_WIDTH = 20

DIGIT_WIDTH = 6
NARROW_PUNCT_WIDTH = 4
MIN_NUMERIC_TEXT_WIDTH = 15

# Room for the sort indicator and type selector in the header.
HEADER_PADDING = 40
CELL_PADDING = 16
NUMERIC_CELL_PADDING = 12

NUMERIC_VALUE_PATTERNS = [
    re.compile(r'^\d+$'),
    re.compile(r'^\d+\.\d+$'),
    re.compile(r'^-\d+(\.\d+)?$'),
    re.compile(r'^\d{1,3}(,\d{3})*(\.\d+)?$'),
    re.compile(r'^\d{1,2}:\d{2}(:\d{2})?$'),
    re.compile(r'^\d{4}-\d{2}-\d{2}$'),
    re.compile(r'^\d+(\.\d+)?%$'),
    re.compile(r'^\$?\d+(\.\d+)?$'),
]


def char_width(ch: str) -> int:
    if unicodedata.east_asian_width(ch) in ('W', 'F'):
        return WIDE_CHAR_WIDTH
    if ' ' <= ch <= '\x7f':
        return ASCII_CHAR_WIDTH
    return OTHER_CHAR_WIDTH


def text_width(text: str) -> int:
    if not text:
        return 0
    return max(sum(char_width(ch) for ch in text), MIN_TEXT_WIDTH)


def numeric_text_width(text: str) -> int:
    """Tighter estimate for numeric-looking text: digits and signs are narrow."""
    if not text:
        return 0
    width = 0
    for ch in text:
        if ch in '.,:':
            width += NARROW_PUNCT_WIDTH
        else:
            width += DIGIT_WIDTH
    return max(width, MIN_NUMERIC_TEXT_WIDTH)


def is_numeric_value(text: str) -> bool:
    if not text:
        return False
    return any(p.match(text) for p in NUMERIC_VALUE_PATTERNS)


def is_long_content(text: str, settings: TableSettings = DEFAULT_SETTINGS) -> bool:
    return len(text) > settings.long_content_length or any(c in text for c in '\n{[')


def header_suggests_numeric(header: str) -> bool:
    lowered = header.lower()
    return any(keyword in lowered for keyword in NUMERIC_HEADER_KEYWORDS)


def is_numeric_column(header: str, cell_texts: Sequence[str], settings: TableSettings = DEFAULT_SETTINGS) -> bool:
    """Numeric by header keyword, or when enough sampled cells look numeric."""
    if header_suggests_numeric(header):
        return True
    sample = [t.strip() for t in cell_texts[:settings.width_sample_size]]
    if not sample:
        return False
    numeric_count = sum(1 for t in sample if is_numeric_value(t))
    return numeric_count / len(sample) >= settings.numeric_ratio


def ideal_column_width(
    header: str,
    cell_texts: Sequence[str],
    numeric: Optional[bool] = None,
    settings: TableSettings = DEFAULT_SETTINGS,
) -> int:
    """Width a column wants before any viewport scaling, clamped to the column limits."""
    if numeric is None:
        numeric = is_numeric_column(header, cell_texts, settings)
    header_width = text_width(header) + HEADER_PADDING
    column_max = settings.numeric_max_width if numeric else settings.max_column_width

    max_cell_width = 0
    for text in cell_texts[:settings.width_sample_size]:
        text = text.strip()
        if numeric:
            width = numeric_text_width(text) + NUMERIC_CELL_PADDING
        else:
            width = text_width(text) + CELL_PADDING
        if is_long_content(text, settings):
            width = min(width, column_max)
        max_cell_width = max(max_cell_width, width)

    return max(settings.min_column_width, min(column_max, max(header_width, max_cell_width)))


def available_width(container_width: int, settings: TableSettings = DEFAULT_SETTINGS) -> int:
    return container_width - settings.scrollbar_allowance


def fit_widths(ideal: Mapping[str, int], available: int, settings: TableSettings = DEFAULT_SETTINGS) -> Dict[str, int]:
    """Scale ``ideal`` widths down by a common ratio until they fit ``available``.

    Columns whose scaled width would drop under the minimum are pinned at the
    minimum and the ratio is recomputed for the rest, so the result either
    fits or is all minimum widths.
    """
    widths = dict(ideal)
    if sum(widths.values()) <= available:
        return widths

    floor = settings.min_column_width
    pinned = set()
    while True:
        flexible = [k for k in widths if k not in pinned]
        if not flexible:
            break
        budget = available - floor * len(pinned)
        flexible_total = sum(ideal[k] for k in flexible)
        ratio = budget / flexible_total if flexible_total > 0 else 0
        too_narrow = [k for k in flexible if math.floor(ideal[k] * ratio) < floor]
        if not too_narrow:
            for k in flexible:
                widths[k] = math.floor(ideal[k] * ratio)
            break
        pinned.update(too_narrow)

    for k in pinned:
        widths[k] = floor
    return widths


def plan_column_widths(
    headers: Iterable[str],
    column_texts: Mapping[str, Sequence[str]],
    container_width: Optional[int] = None,
    numeric_columns: Optional[Mapping[str, bool]] = None,
    settings: TableSettings = DEFAULT_SETTINGS,
) -> Dict[str, int]:
    """Column key to pixel width for the given realized cell text.

    Without ``container_width`` the ideal widths are returned unscaled.
    """
    ideal: Dict[str, int] = {}
    for header in headers:
        numeric = (numeric_columns or {}).get(header)
        ideal[header] = ideal_column_width(header, list(column_texts.get(header, [])), numeric, settings)

    if container_width is None or not settings.auto_resize:
        return ideal
    return fit_widths(ideal, available_width(container_width, settings), settings)
