from __future__ import annotations

import csv
import json
import os
import tempfile
from typing import Any, Dict, List, Optional

from .accessors import MISSING, get_cell_value
from .inference import Table
from .renderer import RenderPlan

EXPORT_FORMATS = ('CSV', 'JSON')


def flatten_for_csv(value: Any) -> Any:
    """CSV cell for a raw value: scalar lists joined, other containers as JSON."""
    if value is MISSING or value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, list):
        if all(isinstance(v, (str, int, float, bool)) or v is None for v in value):
            return ", ".join("" if v is None else str(v) for v in value)
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return value


def view_records(table: Table, plan: RenderPlan) -> List[Dict[str, Any]]:
    """Raw values of the rows currently shown, in view order; absent cells are omitted."""
    records: List[Dict[str, Any]] = []
    for rendered in plan.rows:
        source = table.rows[rendered.index]
        record: Dict[str, Any] = {}
        for header in plan.headers:
            value = get_cell_value(source, header)
            if value is not MISSING:
                record[header] = value
        records.append(record)
    return records


def export_view(
    table: Table,
    plan: RenderPlan,
    output_format: str = 'CSV',
    file_name: Optional[str] = None,
    directory: Optional[str] = None,
) -> str:
    """Write the current view to a CSV or JSON file and return its path."""
    output_format = (output_format or 'CSV').upper()
    if output_format not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {output_format}")

    if not file_name or not file_name.strip():
        file_name = "table"
    file_name = file_name.strip()
    ext = f".{output_format.lower()}"
    if not file_name.lower().endswith(ext):
        file_name += ext

    path = os.path.join(directory or tempfile.gettempdir(), file_name)
    records = view_records(table, plan)

    if output_format == 'CSV':
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=plan.headers)
            writer.writeheader()
            for record in records:
                writer.writerow({h: flatten_for_csv(record.get(h, MISSING)) for h in plan.headers})
    else:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
    return path
