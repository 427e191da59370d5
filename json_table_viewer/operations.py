from __future__ import annotations

import locale
from typing import Any, Dict, List, Sequence

from .accessors import get_cell_value, is_absent
from .formatting import is_number, text_form

ASC = 'asc'
DESC = 'desc'

Row = Dict[str, Any]


def normalize_direction(direction: str) -> str:
    direction = (direction or ASC).lower()
    if direction not in (ASC, DESC):
        raise ValueError(f"Sort direction must be '{ASC}' or '{DESC}', got {direction!r}")
    return direction


def string_sort_key(value: Any) -> str:
    return locale.strxfrm(text_form(value).casefold())


def sort_indices(rows: Sequence[Row], column: str, direction: str = ASC) -> List[int]:
    """Row positions ordered by ``column``; nulls and missing cells always come last.

    The column compares numerically when every present value is a number,
    otherwise by case-insensitive, locale-aware text. The sort is stable in
    both directions.
    """
    direction = normalize_direction(direction)
    present: List[int] = []
    absent: List[int] = []
    values = [get_cell_value(row, column) for row in rows]
    for i, value in enumerate(values):
        (absent if is_absent(value) else present).append(i)

    if all(is_number(values[i]) for i in present):
        key = lambda i: values[i]  # noqa: E731
    else:
        keys = {i: string_sort_key(values[i]) for i in present}
        key = keys.__getitem__

    ordered = sorted(present, key=key, reverse=(direction == DESC))
    return ordered + absent


def sort_rows(rows: Sequence[Row], column: str, direction: str = ASC) -> List[Row]:
    return [rows[i] for i in sort_indices(rows, column, direction)]


def row_matches(row: Row, needle: str) -> bool:
    if not isinstance(row, dict):
        return needle in text_form(row).lower()
    return any(needle in text_form(value).lower() for value in row.values())


def search_indices(rows: Sequence[Row], term: str) -> List[int]:
    """Positions of rows where any value contains ``term``, case-insensitively."""
    if term is None or not term.strip():
        return list(range(len(rows)))
    needle = term.strip().lower()
    return [i for i, row in enumerate(rows) if row_matches(row, needle)]


def search_rows(rows: Sequence[Row], term: str) -> List[Row]:
    return [rows[i] for i in search_indices(rows, term)]
