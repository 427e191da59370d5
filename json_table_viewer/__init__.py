"""Core logic for the JSON Table Viewer.

The Gradio UI lives in `app.py`. This package contains the pieces it wires:
- parse raw JSON text and classify parse failures
- infer rows/columns from an arbitrary JSON value
- format cells per column display type and estimate column widths
- sort, search and export the current view
"""

__version__ = "0.3.0"


class ViewerError(Exception):
    """Base class for errors raised by the viewer."""


class StorageError(ViewerError):
    """Persisted state could not be read or written."""


class UnsupportedFileError(ViewerError):
    """An uploaded file is not a JSON-like file."""
