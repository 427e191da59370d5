"""The orchestrator that owns the current table, overrides and view options.

All mutation goes through one re-entrant lock, so a render (including its
width pass) completes before the next event, including debounced ones
fired from timer threads, is processed.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .config import DEFAULT_SETTINGS, RESIZE_DEBOUNCE, SEARCH_DEBOUNCE, TableSettings
from .display_types import ColumnTypeOverrides
from . import formats
from .inference import Table
from .operations import ASC, DESC
from .parsing import ParseError, ParseResult, parse_json_text
from .renderer import RenderPlan, SortState, plan_widths, render
from .scheduler import CoalescingScheduler
from .state import StateStore, TableOptions, ViewerState

logger = logging.getLogger(__name__)

PlanCallback = Callable[[Optional[RenderPlan]], None]


class ViewerSession:
    def __init__(
        self,
        store: Optional[StateStore] = None,
        settings: TableSettings = DEFAULT_SETTINGS,
        scheduler: Optional[CoalescingScheduler] = None,
        container_width: Optional[int] = None,
    ):
        self.store = store
        self.settings = settings
        if scheduler is None:
            scheduler = store.scheduler if store is not None else CoalescingScheduler()
        self.scheduler = scheduler
        self.container_width = container_width
        self.overrides = store.load_column_types() if store is not None else ColumnTypeOverrides()
        self.json_input = ''
        self.table: Optional[Table] = None
        self.sort: Optional[SortState] = None
        self.search_term = ''
        self.plan: Optional[RenderPlan] = None
        self.error: Optional[ParseError] = None
        self._lock = threading.RLock()

    # --- input ---

    def load_text(self, text: str) -> ParseResult:
        """Parse ``text`` and render it; a failed parse leaves no table behind."""
        with self._lock:
            result = parse_json_text(text)
            self.json_input = text or ''
            self.sort = None
            self.search_term = ''
            if result.ok:
                self.table = result.table
                self.error = None
                self.rerender()
            else:
                self.table = None
                self.plan = None
                self.error = result.error
            self.autosave()
            return result

    def load_file(self, file_obj) -> ParseResult:
        # Reading happens before any state changes, so a failed read keeps the current table.
        content = formats.load_file(file_obj)
        return self.load_text(content)

    def clear(self) -> None:
        with self._lock:
            self.scheduler.cancel_all()
            self.json_input = ''
            self.table = None
            self.plan = None
            self.error = None
            self.sort = None
            self.search_term = ''
            if self.store is not None:
                self.store.scheduler.cancel('autosave')
                self.store.clear_state()

    # --- rendering ---

    def rerender(self) -> Optional[RenderPlan]:
        with self._lock:
            if self.table is None:
                self.plan = None
                return None
            self.plan = render(
                self.table,
                self.overrides,
                container_width=self.container_width,
                sort=self.sort,
                search_term=self.search_term,
                settings=self.settings,
            )
            return self.plan

    def set_column_type(self, column: str, display_type) -> Optional[RenderPlan]:
        with self._lock:
            self.overrides.set(column, display_type)
            if self.store is not None:
                self.store.save_column_types(self.overrides)
            return self.rerender()

    def sort_by(self, column: str, direction: Optional[str] = None) -> Optional[RenderPlan]:
        """Sort by ``column``; without a direction, toggles when already sorted by it."""
        with self._lock:
            if direction is None:
                toggled = self.sort is not None and self.sort.column == column and self.sort.direction == ASC
                direction = DESC if toggled else ASC
            self.sort = SortState(column, direction)
            plan = self.rerender()
            self.autosave()
            return plan

    def search(self, term: str) -> Optional[RenderPlan]:
        with self._lock:
            self.search_term = term or ''
            plan = self.rerender()
            self.autosave()
            return plan

    def resize(self, container_width: Optional[int]) -> Optional[RenderPlan]:
        """Recompute the width plan only; the body is left as rendered."""
        with self._lock:
            self.container_width = container_width
            if self.plan is not None:
                plan_widths(self.plan, self.overrides, container_width, self.settings)
            return self.plan

    # --- debounced entry points ---

    def schedule_search(self, term: str, callback: Optional[PlanCallback] = None) -> None:
        self.scheduler.schedule('search', SEARCH_DEBOUNCE, lambda: self._run(self.search, term, callback))

    def schedule_resize(self, container_width: int, callback: Optional[PlanCallback] = None) -> None:
        self.scheduler.schedule('resize', RESIZE_DEBOUNCE, lambda: self._run(self.resize, container_width, callback))

    @staticmethod
    def _run(operation, argument, callback: Optional[PlanCallback]) -> None:
        plan = operation(argument)
        if callback is not None:
            callback(plan)

    # --- persistence ---

    def current_state(self) -> ViewerState:
        return ViewerState(
            json_input=self.json_input,
            table_options=TableOptions(
                sort_column=self.sort.column if self.sort else None,
                sort_direction=self.sort.direction if self.sort else ASC,
                search_term=self.search_term,
            ),
        )

    def autosave(self) -> None:
        if self.store is not None:
            self.store.autosave(self.current_state())

    def save_now(self) -> bool:
        if self.store is None:
            return False
        self.store.scheduler.cancel('autosave')
        return self.store.save_state(self.current_state())

    def restore(self) -> Optional[ParseResult]:
        """Reload the persisted input and reapply its sort and search options."""
        if self.store is None:
            return None
        state = self.store.load_state()
        if state is None or not state.json_input.strip():
            return None
        with self._lock:
            result = self.load_text(state.json_input)
            if result.ok:
                options = state.table_options
                if options.sort_column:
                    self.sort = SortState(options.sort_column, options.sort_direction)
                self.search_term = options.search_term
                self.rerender()
                self.autosave()
            logger.info("Restored saved viewer state")
            return result
