"""Persisted viewer state: the last input plus table options, and column display types.

Each storage key is one JSON file under the storage directory. Failures are
reported through `StateStore.last_error` and logged; callers keep working
in memory when persistence is unavailable.
"""
from __future__ import annotations

import errno
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import StorageError
from .config import (
    AUTOSAVE_DELAY,
    COLUMN_TYPES_STORAGE_KEY,
    MAX_STORAGE_SIZE,
    STATE_STORAGE_KEY,
    storage_dir,
)
from .display_types import ColumnTypeOverrides
from .operations import ASC, normalize_direction
from .scheduler import CoalescingScheduler

logger = logging.getLogger(__name__)

BACKUP_VERSION = '1.0'
DEFAULT_MAX_AGE = 30 * 24 * 60 * 60


class TableOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sort_column: Optional[str] = Field(default=None, alias='sortColumn')
    sort_direction: str = Field(default=ASC, alias='sortDirection')
    search_term: str = Field(default='', alias='searchTerm')

    @field_validator('sort_direction')
    @classmethod
    def check_direction(cls, v: str) -> str:
        return normalize_direction(v)


class ViewerState(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    json_input: str = Field(alias='jsonInput')
    table_options: TableOptions = Field(default_factory=TableOptions, alias='tableOptions')
    last_updated: Optional[str] = Field(default=None, alias='lastUpdated')

    def to_blob(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def default_state() -> ViewerState:
    return ViewerState(json_input='', last_updated=utc_now_iso())


def has_state_changed(current: ViewerState, previous: Optional[ViewerState]) -> bool:
    if previous is None:
        return True
    return current.json_input != previous.json_input or current.table_options != previous.table_options


def describe_storage_error(exc: Exception) -> str:
    if isinstance(exc, PermissionError):
        return "Access to storage was denied. Check the storage directory permissions."
    if isinstance(exc, OSError) and exc.errno in (errno.ENOSPC, getattr(errno, 'EDQUOT', errno.ENOSPC)):
        return "Storage is full. Free some space and try again."
    return f"Storage error: {exc}"


class StateStore:
    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        storage_key: str = STATE_STORAGE_KEY,
        column_types_key: str = COLUMN_TYPES_STORAGE_KEY,
        max_size: int = MAX_STORAGE_SIZE,
        scheduler: Optional[CoalescingScheduler] = None,
    ):
        self.directory = Path(directory) if directory is not None else storage_dir()
        self.storage_key = storage_key
        self.column_types_key = column_types_key
        self.max_size = max_size
        self.scheduler = scheduler or CoalescingScheduler()
        self.last_error: Optional[str] = None

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    # --- raw file access ---

    def _read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(describe_storage_error(e)) from e

    def _write(self, key: str, text: str) -> None:
        if len(text.encode('utf-8')) > self.max_size:
            raise StorageError(f"State exceeds the {self.max_size:,} byte storage limit.")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self.path_for(key).write_text(text, encoding='utf-8')
        except OSError as e:
            raise StorageError(describe_storage_error(e)) from e

    def _report(self, action: str, exc: StorageError) -> None:
        self.last_error = str(exc)
        logger.error("Failed to %s: %s", action, exc)

    # --- viewer state ---

    def save_state(self, state: Union[ViewerState, Dict[str, Any]]) -> bool:
        try:
            if not isinstance(state, ViewerState):
                state = ViewerState.model_validate(state)
        except ValidationError as e:
            logger.warning("Refusing to save invalid state: %s", e)
            return False

        stamped = state.model_copy(update={'last_updated': utc_now_iso()})
        try:
            self._write(self.storage_key, json.dumps(stamped.to_blob(), ensure_ascii=False))
        except StorageError as e:
            self._report('save state', e)
            return False
        self.last_error = None
        logger.info("Saved viewer state to %s", self.path_for(self.storage_key))
        return True

    def load_state(self) -> Optional[ViewerState]:
        try:
            text = self._read(self.storage_key)
        except StorageError as e:
            self._report('load state', e)
            return None
        if text is None:
            return None
        try:
            return ViewerState.model_validate_json(text)
        except ValidationError as e:
            logger.warning("Stored state is invalid, clearing it: %s", e)
            self.clear_state()
            return None

    def clear_state(self) -> bool:
        try:
            self.path_for(self.storage_key).unlink(missing_ok=True)
        except OSError as e:
            self._report('clear state', StorageError(describe_storage_error(e)))
            return False
        return True

    def autosave(self, state: ViewerState, delay: float = AUTOSAVE_DELAY) -> None:
        """Save ``state`` after ``delay`` seconds unless a newer autosave replaces it."""
        self.scheduler.schedule('autosave', delay, lambda: self.save_state(state))

    # --- column display types ---

    def save_column_types(self, overrides: ColumnTypeOverrides) -> bool:
        try:
            self._write(self.column_types_key, json.dumps(overrides.to_dict(), ensure_ascii=False))
        except StorageError as e:
            self._report('save column types', e)
            return False
        return True

    def load_column_types(self) -> ColumnTypeOverrides:
        try:
            text = self._read(self.column_types_key)
        except StorageError as e:
            self._report('load column types', e)
            return ColumnTypeOverrides()
        if text is None:
            return ColumnTypeOverrides()
        try:
            return ColumnTypeOverrides.from_dict(json.loads(text))
        except ValueError as e:
            logger.warning("Stored column types are invalid: %s", e)
            return ColumnTypeOverrides()

    # --- export / import / backup ---

    def export_state(self) -> Optional[str]:
        state = self.load_state()
        if state is None:
            return None
        return json.dumps(state.to_blob(), indent=2, ensure_ascii=False)

    def import_state(self, state_json: str) -> bool:
        try:
            state = ViewerState.model_validate_json(state_json)
        except ValidationError as e:
            logger.warning("Refusing to import invalid state: %s", e)
            return False
        return self.save_state(state)

    def create_backup(self) -> Optional[Dict[str, Any]]:
        state = self.load_state()
        if state is None:
            return None
        return {'data': state.to_blob(), 'timestamp': utc_now_iso(), 'version': BACKUP_VERSION}

    def restore_from_backup(self, backup: Optional[Dict[str, Any]]) -> bool:
        if not backup or not backup.get('data'):
            logger.warning("Backup has no data to restore.")
            return False
        return self.save_state(backup['data'])

    # --- housekeeping ---

    def storage_usage(self) -> Dict[str, Any]:
        total = 0
        count = 0
        if self.directory.is_dir():
            for path in self.directory.glob('*.json'):
                total += path.stat().st_size
                count += 1
        return {
            'totalSize': total,
            'itemCount': count,
            'maxSize': self.max_size,
            'usagePercent': total / self.max_size * 100,
        }

    def cleanup_storage(self, max_age: float = DEFAULT_MAX_AGE) -> int:
        """Delete stored entries older than ``max_age`` seconds, or unreadable ones."""
        if not self.directory.is_dir():
            return 0
        now = time.time()
        deleted = 0
        for path in self.directory.glob('*.json'):
            try:
                data = json.loads(path.read_text(encoding='utf-8'))
            except ValueError:
                path.unlink(missing_ok=True)
                deleted += 1
                continue
            stamp = data.get('lastUpdated') if isinstance(data, dict) else None
            if not stamp:
                continue
            try:
                updated = datetime.fromisoformat(stamp).timestamp()
            except ValueError:
                continue
            if now - updated > max_age:
                path.unlink(missing_ok=True)
                deleted += 1
        logger.info("Removed %d stale storage entries", deleted)
        return deleted
