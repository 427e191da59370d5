"""Structure inference: decide what the rows and columns of an arbitrary JSON value are.

`classify_shape` names the top-level structure once; `infer` dispatches on
that name and never raises for a parsed JSON value. Rows are shallow: nested
objects and arrays stay as cell values except for the nested-object case,
which flattens leaves into dotted column keys.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .paths import join_path

logger = logging.getLogger(__name__)

ROW_INDEX_COLUMN = '_rowIndex'
ARRAY_COLUMN_PREFIX = 'column_'

Row = Dict[str, Any]


class ShapeKind(str, Enum):
    EMPTY_ARRAY = 'empty-array'
    ARRAY_OF_OBJECTS = 'array-of-objects'
    ARRAY_OF_ARRAYS = 'array-of-arrays'
    ARRAY_OF_PRIMITIVES = 'array-of-primitives'
    OBJECT_WITH_ARRAYS = 'object-with-arrays'
    NESTED_OBJECT = 'nested-object'
    FLAT_OBJECT = 'flat-object'
    SCALAR = 'scalar'


@dataclass
class Table:
    """Ordered row records plus the shape they were inferred from.

    ``source_key`` names the property whose array supplied the rows when the
    input was a wrapper object.
    """

    rows: List[Row] = field(default_factory=list)
    shape: ShapeKind = ShapeKind.EMPTY_ARRAY
    source_key: Optional[str] = None

    @property
    def headers(self) -> List[str]:
        return extract_headers(self.rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def __len__(self) -> int:
        return len(self.rows)


def extract_headers(rows: List[Row]) -> List[str]:
    """Union of keys across ``rows``, sorted lexicographically."""
    keys = set()
    for row in rows:
        if isinstance(row, dict):
            keys.update(row.keys())
    return sorted(keys)


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def classify_shape(value: Any) -> ShapeKind:
    """Classify the top-level structure of a parsed JSON value."""
    if isinstance(value, list):
        if not value:
            return ShapeKind.EMPTY_ARRAY
        first = value[0]
        if is_object(first):
            return ShapeKind.ARRAY_OF_OBJECTS
        if isinstance(first, list):
            return ShapeKind.ARRAY_OF_ARRAYS
        return ShapeKind.ARRAY_OF_PRIMITIVES

    if is_object(value):
        values = list(value.values())
        if any(isinstance(v, list) for v in values):
            return ShapeKind.OBJECT_WITH_ARRAYS
        if any(is_object(v) for v in values):
            return ShapeKind.NESTED_OBJECT
        return ShapeKind.FLAT_OBJECT

    return ShapeKind.SCALAR


def longest_array_property(obj: Dict[str, Any]) -> Optional[str]:
    """Key of the longest array-valued property; ties go to the first in key order."""
    best_key = None
    best_len = -1
    for key, val in obj.items():
        if isinstance(val, list) and len(val) > best_len:
            best_key = key
            best_len = len(val)
    return best_key


def flatten_leaves(obj: Dict[str, Any], parent_key: str = '') -> Row:
    """Map every non-object leaf reachable from ``obj`` to its dotted path.

    Walks depth-first with an explicit stack, in key order, so nesting depth
    is bounded by memory rather than the interpreter's recursion limit.
    """
    flat: Row = {}
    stack = [(parent_key, iter(obj.items()))]
    while stack:
        prefix, items = stack[-1]
        for key, val in items:
            path = join_path(prefix, key)
            if is_object(val):
                stack.append((path, iter(val.items())))
                break
            flat[path] = val
        else:
            stack.pop()
    return flat


def rows_from_objects(items: List[Any]) -> List[Row]:
    rows: List[Row] = []
    for item in items:
        if is_object(item):
            rows.append(item)
        else:
            # A stray non-object element still gets a row of its own.
            rows.append({'value': item})
    return rows


def rows_from_arrays(items: List[Any]) -> List[Row]:
    """Rows keyed ``column_0..column_{n-1}``; short rows leave trailing keys absent."""
    rows: List[Row] = []
    for row_index, item in enumerate(items):
        cells = item if isinstance(item, list) else [item]
        row: Row = {ROW_INDEX_COLUMN: row_index}
        for i, cell in enumerate(cells):
            row[f"{ARRAY_COLUMN_PREFIX}{i}"] = cell
        rows.append(row)
    return rows


def rows_from_primitives(items: List[Any]) -> List[Row]:
    return [{'index': i, 'value': item} for i, item in enumerate(items)]


def rows_from_array(items: List[Any]) -> List[Row]:
    shape = classify_shape(items)
    if shape is ShapeKind.EMPTY_ARRAY:
        return []
    if shape is ShapeKind.ARRAY_OF_OBJECTS:
        return rows_from_objects(items)
    if shape is ShapeKind.ARRAY_OF_ARRAYS:
        return rows_from_arrays(items)
    return rows_from_primitives(items)


def infer(value: Any) -> Table:
    """Produce a `Table` for any parsed JSON value."""
    shape = classify_shape(value)

    if shape in (
        ShapeKind.EMPTY_ARRAY,
        ShapeKind.ARRAY_OF_OBJECTS,
        ShapeKind.ARRAY_OF_ARRAYS,
        ShapeKind.ARRAY_OF_PRIMITIVES,
    ):
        table = Table(rows=rows_from_array(value), shape=shape)
    elif shape is ShapeKind.OBJECT_WITH_ARRAYS:
        key = longest_array_property(value)
        table = Table(rows=rows_from_array(value[key]), shape=shape, source_key=key)
    elif shape is ShapeKind.NESTED_OBJECT:
        table = Table(rows=[flatten_leaves(value)], shape=shape)
    elif shape is ShapeKind.FLAT_OBJECT:
        table = Table(rows=[{'key': k, 'value': v} for k, v in value.items()], shape=shape)
    else:
        table = Table(rows=[{'value': value}], shape=shape)

    logger.debug("Inferred %s: %d rows", shape.value, table.row_count)
    return table
