from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)


class ColumnDisplayType(str, Enum):
    AUTO = 'auto'
    STRING = 'string'
    NUMBER = 'number'
    NUMBER_TIME = 'number-time'
    NUMBER_HEX = 'number-hex'
    NUMBER_BINARY = 'number-binary'
    BOOLEAN = 'boolean'
    JSON = 'json'
    DATE = 'date'
    RAW = 'raw'

    @classmethod
    def parse(cls, token) -> "ColumnDisplayType":
        """Accept an enum member or its exact token; anything else is a ValueError."""
        if isinstance(token, cls):
            return token
        return cls(token)

    @property
    def is_numeric(self) -> bool:
        return self in NUMERIC_DISPLAY_TYPES


NUMERIC_DISPLAY_TYPES = frozenset({
    ColumnDisplayType.NUMBER,
    ColumnDisplayType.NUMBER_TIME,
    ColumnDisplayType.NUMBER_HEX,
    ColumnDisplayType.NUMBER_BINARY,
})

DISPLAY_TYPE_LABELS = {
    ColumnDisplayType.AUTO: 'Auto',
    ColumnDisplayType.STRING: 'String',
    ColumnDisplayType.NUMBER: 'Number',
    ColumnDisplayType.NUMBER_TIME: 'Time',
    ColumnDisplayType.NUMBER_HEX: 'Hex',
    ColumnDisplayType.NUMBER_BINARY: 'Binary',
    ColumnDisplayType.BOOLEAN: 'Boolean',
    ColumnDisplayType.JSON: 'JSON',
    ColumnDisplayType.DATE: 'Date',
    ColumnDisplayType.RAW: 'Raw',
}


class ColumnTypeOverrides:
    """Per-column display types, keyed by column key; unset columns are ``auto``.

    Overrides are matched by key only, so a new dataset sharing a column key
    picks up the override set for the previous one.
    """

    def __init__(self, types: Optional[Mapping[str, ColumnDisplayType]] = None):
        self._types: Dict[str, ColumnDisplayType] = {}
        for column, display_type in (types or {}).items():
            self.set(column, display_type)

    def get(self, column: str) -> ColumnDisplayType:
        return self._types.get(column, ColumnDisplayType.AUTO)

    def set(self, column: str, display_type) -> None:
        display_type = ColumnDisplayType.parse(display_type)
        if display_type is ColumnDisplayType.AUTO:
            self._types.pop(column, None)
        else:
            self._types[column] = display_type

    def copy(self) -> "ColumnTypeOverrides":
        return ColumnTypeOverrides(self._types)

    def is_numeric(self, column: str) -> bool:
        return self.get(column).is_numeric

    def to_dict(self) -> Dict[str, str]:
        return {column: display_type.value for column, display_type in self._types.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, str]]) -> "ColumnTypeOverrides":
        """Rebuild from persisted tokens, skipping ones that are not display types."""
        overrides = cls()
        if not isinstance(data, Mapping):
            return overrides
        for column, token in data.items():
            try:
                overrides.set(str(column), token)
            except ValueError:
                logger.warning("Ignoring unknown display type %r for column %r", token, column)
        return overrides

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, column) -> bool:
        return column in self._types

    def __eq__(self, other) -> bool:
        if not isinstance(other, ColumnTypeOverrides):
            return NotImplemented
        return self._types == other._types

    def __repr__(self) -> str:
        return f"ColumnTypeOverrides({self.to_dict()!r})"
