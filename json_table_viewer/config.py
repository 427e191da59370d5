"""Shared configuration for table layout, debouncing and persisted state."""
from __future__ import annotations

import locale
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE = 0.3
RESIZE_DEBOUNCE = 0.15
AUTOSAVE_DELAY = 1.0

STATE_STORAGE_KEY = "json-table-viewer-state"
COLUMN_TYPES_STORAGE_KEY = "jsonTableColumnTypes"
MAX_STORAGE_SIZE = 5 * 1024 * 1024

NUMERIC_HEADER_KEYWORDS = (
    "id", "count", "number", "amount", "price", "value", "score",
    "rate", "percent", "age", "year", "month", "day", "time", "timestamp",
)


class TableSettings(BaseModel):
    """Layout knobs for column width planning."""

    min_column_width: int = Field(default=100, gt=0)
    max_column_width: int = Field(default=300, gt=0)
    default_column_width: int = Field(default=150, gt=0)
    numeric_max_width: int = Field(default=120, gt=0)
    auto_resize: bool = True
    # Room reserved for the scrollbar and container padding.
    scrollbar_allowance: int = Field(default=60, ge=0)
    width_sample_size: int = Field(default=10, gt=0)
    numeric_ratio: float = Field(default=0.7, ge=0.0, le=1.0)
    long_content_length: int = Field(default=50, gt=0)

    def updated(self, **changes) -> "TableSettings":
        """Return a validated copy with ``changes`` applied."""
        return TableSettings(**{**self.model_dump(), **changes})


DEFAULT_SETTINGS = TableSettings()


def storage_dir() -> Path:
    """Directory holding persisted viewer state."""
    configured = os.environ.get("JSON_TABLE_VIEWER_HOME")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".json_table_viewer"


def configure_collation() -> str:
    """Apply the collation locale used for sorting text columns and return its name.

    ``JSON_TABLE_VIEWER_LOCALE`` picks the locale; when unset, the user's
    environment default is used. An unavailable locale keeps the current one.
    """
    requested = os.environ.get("JSON_TABLE_VIEWER_LOCALE", "")
    try:
        locale.setlocale(locale.LC_COLLATE, requested)
    except locale.Error as e:
        logger.warning("Collation locale %r unavailable, keeping %r: %s", requested, locale.setlocale(locale.LC_COLLATE), e)
    return locale.setlocale(locale.LC_COLLATE)
