from __future__ import annotations

from typing import List

SEP = '.'


def join_path(prefix: str, key) -> str:
    """Append ``key`` to a dot path; an empty prefix yields the bare key."""
    if not isinstance(key, str):
        key = str(key)
    return f"{prefix}{SEP}{key}" if prefix else key


def split_path(path: str) -> List[str]:
    """Split a column key on '.' into its segments.

    Keys are not escaped, so a raw key such as 'gpt-3.5' splits into two
    segments here; `accessors.get_cell_value` re-joins segments when the
    split form does not resolve.
    """
    if path is None:
        return []
    if not isinstance(path, str):
        path = str(path)
    if path == '':
        return []
    return path.split(SEP)


def is_nested_path(path: str) -> bool:
    return isinstance(path, str) and SEP in path
