"""Pre-processing of JSON-adjacent file formats into plain JSON text.

JSON Lines / NDJSON and GeoJSON FeatureCollections are rewritten to a JSON
array so the rest of the pipeline only ever sees one JSON document.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from . import UnsupportedFileError
from .parsing import loads_strict

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('.json', '.jsonl', '.ndjson', '.geojson', '.txt')
INVALID_LINE_ERROR = 'Invalid JSON'


def _compact(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))


def file_extension(file_name: str) -> str:
    return os.path.splitext(file_name or '')[1].lower()


def is_supported_file(file_name: str) -> bool:
    return file_extension(file_name) in SUPPORTED_EXTENSIONS


def parse_json_lines(content: str) -> List[Any]:
    """One value per non-blank line; a bad line becomes a ``{line, content, error}`` row."""
    values: List[Any] = []
    for number, raw_line in enumerate(content.strip().split('\n'), start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            values.append(loads_strict(line))
        except (ValueError, RecursionError) as e:
            logger.warning("JSONL line %d failed to parse: %s", number, e)
            values.append({'line': number, 'content': line, 'error': INVALID_LINE_ERROR})
    return values


def feature_to_row(feature: Dict[str, Any], index: int) -> Dict[str, Any]:
    geometry = feature.get('geometry') if isinstance(feature.get('geometry'), dict) else None
    properties = feature.get('properties') if isinstance(feature.get('properties'), dict) else None
    feature_id = feature.get('id')

    row: Dict[str, Any] = {
        'id': feature_id if feature_id not in (None, '') else index,
        'type': feature.get('type'),
        'geometry_type': geometry.get('type') if geometry else None,
        'geometry_coordinates': (
            _compact(geometry['coordinates']) if geometry and geometry.get('coordinates') is not None else None
        ),
        'properties': _compact(properties) if properties is not None else None,
    }
    for key, val in (properties or {}).items():
        row[f"prop_{key}"] = val
    return row


def geojson_to_rows(data: Any) -> Optional[List[Dict[str, Any]]]:
    """Rows for a FeatureCollection, or None when ``data`` is not one."""
    if not isinstance(data, dict) or data.get('type') != 'FeatureCollection':
        return None
    features = data.get('features')
    if not isinstance(features, list):
        return None
    return [
        feature_to_row(feature if isinstance(feature, dict) else {}, i)
        for i, feature in enumerate(features)
    ]


def preprocess_geojson(content: str) -> str:
    try:
        data = loads_strict(content)
    except (ValueError, RecursionError) as e:
        # Left for the JSON parser to report.
        logger.warning("GeoJSON failed to parse: %s", e)
        return content
    rows = geojson_to_rows(data)
    if rows is None:
        return content
    return json.dumps(rows, indent=2, ensure_ascii=False)


def preprocess_content(content: str, file_name: str = '') -> str:
    """Rewrite ``content`` into JSON text according to the file extension."""
    ext = file_extension(file_name)
    if ext in ('.jsonl', '.ndjson'):
        return json.dumps(parse_json_lines(content), indent=2, ensure_ascii=False)
    if ext == '.geojson':
        return preprocess_geojson(content)
    return content


def read_text_content(file_obj) -> str:
    """Read text from an uploaded file object or a file path."""
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return content

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def load_file(file_obj) -> str:
    """Read and pre-process an upload, rejecting files that are not JSON-like."""
    path = getattr(file_obj, 'name', None) if hasattr(file_obj, 'read') else getattr(file_obj, 'name', file_obj)
    file_name = os.path.basename(str(path)) if path else ''
    if file_name and not is_supported_file(file_name):
        raise UnsupportedFileError(
            f"Only JSON files ({', '.join(SUPPORTED_EXTENSIONS)}) can be uploaded: {file_name}"
        )
    return preprocess_content(read_text_content(file_obj), file_name)
