"""HTML for a `RenderPlan`: fixed column widths, expandable nested cells, search highlight."""
from __future__ import annotations

import html
import re
from typing import List, Optional

from .formatting import CellView, NestedTable
from .renderer import RenderPlan

TABLE_STYLE = """
<style>
.jtv-wrapper { width: 100%; overflow-x: auto; }
.jtv-table { border-collapse: collapse; table-layout: fixed; font-size: 14px; }
.jtv-table th, .jtv-table td { border: 1px solid #e5e7eb; padding: 6px 8px; vertical-align: top;
  overflow: hidden; text-overflow: ellipsis; word-break: break-word; }
.jtv-table th { background: #f9fafb; text-align: left; }
.jtv-table td[data-numeric="true"], .jtv-table th[data-numeric="true"] { text-align: right; }
.jtv-table th.sort-asc::after { content: " \\25B2"; }
.jtv-table th.sort-desc::after { content: " \\25BC"; }
.jtv-nested { border-collapse: collapse; margin: 6px 0; width: 100%; }
.jtv-nested th, .jtv-nested td { border: 1px solid #e5e7eb; padding: 4px 6px; }
.jtv-json { white-space: pre-wrap; font-family: monospace; font-size: 12px; }
.jtv-null { color: #9ca3af; font-style: italic; }
mark { background: #fde68a; }
</style>
"""


def highlight(text: str, term: str) -> str:
    """Escape ``text`` and wrap case-insensitive matches of ``term`` in <mark>."""
    if not term or not term.strip():
        return html.escape(text)
    pattern = re.compile(re.escape(term.strip()), re.IGNORECASE)
    out: List[str] = []
    last = 0
    for match in pattern.finditer(text):
        out.append(html.escape(text[last:match.start()]))
        out.append(f"<mark>{html.escape(match.group(0))}</mark>")
        last = match.end()
    out.append(html.escape(text[last:]))
    return ''.join(out)


def nested_table_html(nested: NestedTable) -> str:
    rows = []
    for key, cell in nested.entries:
        rows.append(f"<tr><td>{html.escape(key)}</td><td>{cell_html(cell)}</td></tr>")
    return (
        '<table class="jtv-nested">'
        f"<thead><tr><th>{nested.key_label}</th><th>Value</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def cell_html(cell: CellView, term: str = '') -> str:
    if cell.expandable:
        return (
            f"<details><summary>{html.escape(cell.text)}</summary>"
            f"{nested_table_html(cell.expand())}</details>"
        )
    if '\n' in cell.text:
        return f'<div class="jtv-json">{highlight(cell.text, term)}</div>'
    if cell.data_type in ('null', 'absent'):
        return f'<span class="jtv-null">{html.escape(cell.text)}</span>'
    return highlight(cell.text, term)


def _numeric_attr(flag: bool) -> str:
    return ' data-numeric="true"' if flag else ''


def header_html(plan: RenderPlan, header: str) -> str:
    width = plan.widths.get(header)
    style = f' style="width:{width}px;min-width:{width}px;max-width:{width}px"' if width else ''
    classes = 'sortable'
    aria = 'none'
    if plan.sort is not None:
        aria = plan.sort.aria_sort(header)
        if aria != 'none':
            classes += ' sort-asc' if aria == 'ascending' else ' sort-desc'
    return (
        f'<th class="{classes}" data-column="{html.escape(header, quote=True)}" aria-sort="{aria}"'
        f"{_numeric_attr(header in plan.numeric_columns)}{style}>{html.escape(header)}</th>"
    )


def plan_to_html(plan: Optional[RenderPlan], message: str = '') -> str:
    """Full HTML for ``plan``, or an empty/no-results state."""
    if plan is None:
        return f'<div class="jtv-empty">{html.escape(message or "No data loaded.")}</div>'
    if plan.is_empty:
        return '<div class="jtv-empty">The data has no rows to show.</div>'
    if plan.no_results:
        return (
            '<div class="jtv-empty">No results found for '
            f'"{html.escape(plan.search_term)}".</div>'
        )

    head = ''.join(header_html(plan, h) for h in plan.headers)
    body = []
    for row in plan.rows:
        cells = ''.join(
            f"<td{_numeric_attr(h in plan.numeric_columns)}>{cell_html(row.cells[h], plan.search_term)}</td>"
            for h in plan.headers
        )
        body.append(f'<tr data-row-index="{row.index}">{cells}</tr>')
    return (
        f'{TABLE_STYLE}<div class="jtv-wrapper"><table class="jtv-table">'
        f"<thead><tr>{head}</tr></thead><tbody>{''.join(body)}</tbody></table></div>"
    )
