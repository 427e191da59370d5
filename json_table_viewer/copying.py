from __future__ import annotations

import json
from typing import Any, Dict, Sequence

from .accessors import get_cell_value, is_absent
from .formatting import text_form


def cell_copy_text(value: Any) -> str:
    """Clipboard text for one cell: containers as indented JSON."""
    if is_absent(value):
        return 'null'
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return text_form(value)


def row_copy_text(row: Dict[str, Any], fmt: str = 'json') -> str:
    """A row as indented JSON, or as ``key: value`` lines when ``fmt`` is 'text'."""
    if fmt == 'json':
        return json.dumps(row, indent=2, ensure_ascii=False)
    return '\n'.join(f"{key}: {text_form(value)}" for key, value in row.items())


def column_copy_text(rows: Sequence[Dict[str, Any]], column: str, include_header: bool = False) -> str:
    lines = [text_form(get_cell_value(row, column)) for row in rows]
    if include_header:
        lines.insert(0, column)
    return '\n'.join(lines)
