from __future__ import annotations

from typing import Any, Mapping

from .paths import is_nested_path, split_path


class _Missing:
    """Absence marker for a column a row does not have."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'MISSING'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()


def is_absent(value: Any) -> bool:
    """True for JSON null and for a missing cell."""
    return value is None or value is MISSING


def get_cell_value(row: Any, column: str) -> Any:
    """Look up ``column`` on ``row``, resolving dot paths through nested objects.

    A literal key wins over a nested walk, so flattened rows such as
    ``{"inventory.stock": 5}`` and nested rows such as
    ``{"inventory": {"stock": 5}}`` both answer ``inventory.stock``.
    Any missing intermediate segment yields ``MISSING``; lookups never raise.
    """
    if not isinstance(row, Mapping):
        return MISSING
    if column in row:
        return row[column]
    if not is_nested_path(column):
        return MISSING

    keys = split_path(column)
    val: Any = row
    i = 0
    while i < len(keys):
        if not isinstance(val, Mapping):
            return MISSING
        key = keys[i]
        if key in val:
            val = val[key]
            i += 1
            continue
        # Fallback for dict keys that themselves contain dots
        # (e.g. 'gpt-3.5' under 'responses.gpt-3.5.score').
        matched = False
        candidate = key
        for j in range(i + 1, len(keys)):
            candidate = candidate + '.' + keys[j]
            if candidate in val:
                val = val[candidate]
                i = j + 1
                matched = True
                break
        if not matched:
            return MISSING
    return val
