"""Adaptive table rendering: headers, formatted cells and a column width plan.

`render` works on an inferred `Table` and never re-runs inference. Search and
sort produce a view of row positions into ``table.rows`` so every rendered
row can be traced back to its original record.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from .accessors import get_cell_value
from .config import DEFAULT_SETTINGS, TableSettings
from .display_types import ColumnTypeOverrides
from .formatting import CellView, format_cell
from .inference import Table
from .operations import ASC, normalize_direction, search_indices, sort_indices
from .widths import is_numeric_column, plan_column_widths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SortState:
    column: str
    direction: str = ASC

    def __post_init__(self):
        object.__setattr__(self, 'direction', normalize_direction(self.direction))

    def aria_sort(self, column: str) -> str:
        if column != self.column:
            return 'none'
        return 'ascending' if self.direction == ASC else 'descending'


@dataclass
class RenderedRow:
    index: int
    cells: Dict[str, CellView]


@dataclass
class RenderPlan:
    headers: List[str]
    rows: List[RenderedRow] = field(default_factory=list)
    widths: Dict[str, int] = field(default_factory=dict)
    numeric_columns: Set[str] = field(default_factory=set)
    sort: Optional[SortState] = None
    search_term: str = ''
    total_rows: int = 0

    @property
    def visible_rows(self) -> int:
        return len(self.rows)

    @property
    def row_indices(self) -> List[int]:
        return [row.index for row in self.rows]

    @property
    def is_empty(self) -> bool:
        return self.total_rows == 0

    @property
    def no_results(self) -> bool:
        """A non-empty search matched nothing in a non-empty table."""
        return self.total_rows > 0 and not self.rows and bool(self.search_term.strip())

    def column_texts(self, sample_size: Optional[int] = None) -> Dict[str, List[str]]:
        rows = self.rows if sample_size is None else self.rows[:sample_size]
        return {h: [row.cells[h].text for row in rows] for h in self.headers}

    def info(self) -> str:
        shown = f"{self.visible_rows:,}" if self.visible_rows == self.total_rows else f"{self.visible_rows:,} of {self.total_rows:,}"
        return f"{shown} rows • {len(self.headers)} columns"


def view_indices(table: Table, sort: Optional[SortState] = None, search_term: str = '') -> List[int]:
    """Positions of the rows to show: filtered by ``search_term``, then sorted."""
    indices = search_indices(table.rows, search_term)
    if sort is None:
        return indices
    subset = [table.rows[i] for i in indices]
    return [indices[j] for j in sort_indices(subset, sort.column, sort.direction)]


def render_body(
    table: Table,
    headers: Sequence[str],
    indices: Sequence[int],
    overrides: ColumnTypeOverrides,
) -> List[RenderedRow]:
    rendered: List[RenderedRow] = []
    for index in indices:
        row = table.rows[index]
        cells = {h: format_cell(get_cell_value(row, h), overrides.get(h)) for h in headers}
        rendered.append(RenderedRow(index=index, cells=cells))
    return rendered


def plan_widths(
    plan: RenderPlan,
    overrides: ColumnTypeOverrides,
    container_width: Optional[int] = None,
    settings: TableSettings = DEFAULT_SETTINGS,
) -> None:
    """Width pass over a materialized plan; fills ``widths`` and ``numeric_columns`` in place."""
    texts = plan.column_texts(settings.width_sample_size)
    numeric = {h: overrides.is_numeric(h) or is_numeric_column(h, texts[h], settings) for h in plan.headers}
    plan.numeric_columns = {h for h, flag in numeric.items() if flag}
    plan.widths = plan_column_widths(plan.headers, texts, container_width, numeric, settings)


def render(
    table: Table,
    overrides: Optional[ColumnTypeOverrides] = None,
    container_width: Optional[int] = None,
    sort: Optional[SortState] = None,
    search_term: str = '',
    settings: TableSettings = DEFAULT_SETTINGS,
) -> RenderPlan:
    """Render ``table`` with per-column display ``overrides`` into a `RenderPlan`."""
    overrides = overrides if overrides is not None else ColumnTypeOverrides()
    search_term = search_term or ''
    headers = table.headers
    indices = view_indices(table, sort, search_term)
    plan = RenderPlan(
        headers=headers,
        rows=render_body(table, headers, indices, overrides),
        sort=sort,
        search_term=search_term,
        total_rows=table.row_count,
    )
    plan_widths(plan, overrides, container_width, settings)
    logger.debug("Rendered %d/%d rows, %d columns", plan.visible_rows, plan.total_rows, len(headers))
    return plan
