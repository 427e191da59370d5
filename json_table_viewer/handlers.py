"""Gradio event handlers.

Each handler receives the per-browser `ViewerSession` held in a ``gr.State``
(created on first use) and returns it alongside the component updates, so
`app.py` only wires inputs to outputs.
"""
from __future__ import annotations

import logging
from typing import Optional

import gradio as gr

from . import ViewerError
from .copying import column_copy_text, row_copy_text
from .display_types import ColumnDisplayType
from .export import export_view
from .html_view import plan_to_html
from .operations import ASC, DESC
from .parsing import ParseResult, format_json_text, is_valid_json
from .samples import SAMPLES, get_sample_json
from .session import ViewerSession
from .state import StateStore

logger = logging.getLogger(__name__)

SORT_TOGGLE = "Toggle"
SORT_CHOICES = {"Ascending": ASC, "Descending": DESC}


def new_session() -> ViewerSession:
    return ViewerSession(store=StateStore())


def ensure_session(session: Optional[ViewerSession]) -> ViewerSession:
    return session if session is not None else new_session()


def status_for(result: ParseResult) -> str:
    if result.ok:
        return f"Loaded {result.row_count:,} rows and {result.column_count:,} columns."
    return f"Error: {result.error.message}"


def view_outputs(session: ViewerSession, status: str = ""):
    """(session, table html, info, status, column dropdown) for the current view."""
    plan = session.plan
    message = session.error.message if session.error is not None else ""
    info = plan.info() if plan is not None else ""
    headers = plan.headers if plan is not None else []
    return session, plan_to_html(plan, message), info, status, gr.update(choices=headers)


def parse_text_handler(session, text: str):
    session = ensure_session(session)
    result = session.load_text(text)
    return view_outputs(session, status_for(result))


def upload_file_handler(session, file_obj):
    """Load an uploaded file; the input box receives the (pre-processed) JSON text."""
    session = ensure_session(session)
    if file_obj is None:
        return (*view_outputs(session, "No file uploaded."), gr.update())
    try:
        result = session.load_file(file_obj)
    except ViewerError as e:
        return (*view_outputs(session, f"Error: {e}"), gr.update())
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Reading upload failed: %s", e)
        return (*view_outputs(session, f"Error reading file: {e}"), gr.update())
    return (*view_outputs(session, status_for(result)), session.json_input)


def format_json_handler(text: str):
    if not text or not text.strip():
        return text, "Nothing to format."
    if not is_valid_json(text):
        return text, "Error: the input is not valid JSON."
    return format_json_text(text), "Formatted."


def load_sample_handler(session, sample_key: str):
    session = ensure_session(session)
    text = get_sample_json(sample_key)
    result = session.load_text(text)
    name = SAMPLES.get(sample_key, {}).get('name', sample_key)
    return (*view_outputs(session, f"Sample '{name}': {status_for(result)}"), text)


def clear_handler(session):
    session = ensure_session(session)
    session.clear()
    return (*view_outputs(session, "Cleared."), "", "")


def column_selected_handler(session, column: str):
    if session is None or not column:
        return gr.update(value=ColumnDisplayType.AUTO.value)
    return gr.update(value=session.overrides.get(column).value)


def column_type_handler(session, column: str, display_type: str):
    session = ensure_session(session)
    if not column:
        return view_outputs(session, "Select a column first.")
    try:
        session.set_column_type(column, display_type or ColumnDisplayType.AUTO.value)
    except ValueError as e:
        return view_outputs(session, f"Error: {e}")
    return view_outputs(session, f"Column '{column}' shown as {display_type}.")


def sort_handler(session, column: str, direction_label: str = SORT_TOGGLE):
    session = ensure_session(session)
    if session.table is None:
        return view_outputs(session, "Load data before sorting.")
    if not column:
        return view_outputs(session, "Select a column to sort by.")
    session.sort_by(column, SORT_CHOICES.get(direction_label))
    return view_outputs(session, f"Sorted by '{column}' ({session.sort.direction}).")


def search_handler(session, term: str):
    session = ensure_session(session)
    session.search(term)
    return view_outputs(session, "")


def resize_handler(session, container_width):
    session = ensure_session(session)
    width = int(container_width) if container_width else None
    session.resize(width)
    return view_outputs(session, "")


def export_handler(session, output_format: str, file_name: str):
    if session is None or session.plan is None or session.table is None:
        return None, "Nothing to export."
    try:
        path = export_view(session.table, session.plan, output_format, file_name)
    except (OSError, ValueError) as e:
        logger.error("Export failed: %s", e)
        return None, f"Export failed: {e}"
    return path, f"Exported {session.plan.visible_rows:,} rows."


def copy_column_handler(session, column: str, include_header: bool = False):
    if session is None or session.plan is None or not column:
        return ""
    rows = [session.table.rows[i] for i in session.plan.row_indices]
    return column_copy_text(rows, column, include_header)


def copy_row_handler(session, row_number, fmt: str = 'json'):
    """Copy the ``row_number``-th visible row (1-based)."""
    if session is None or session.plan is None or not row_number:
        return ""
    position = int(row_number) - 1
    indices = session.plan.row_indices
    if not 0 <= position < len(indices):
        return ""
    return row_copy_text(session.table.rows[indices[position]], (fmt or 'json').lower())


def restore_handler(session):
    """Reload persisted input and options when the page opens."""
    session = ensure_session(session)
    result = session.restore()
    status = "Restored previous session." if result is not None and result.ok else ""
    return (*view_outputs(session, status), session.json_input, session.search_term)


def save_now_handler(session):
    session = ensure_session(session)
    if session.save_now():
        return session, "Saved."
    error = session.store.last_error if session.store is not None else None
    return session, f"Save failed: {error}" if error else "Save failed."
