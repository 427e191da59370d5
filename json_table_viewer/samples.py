from __future__ import annotations

import json
from typing import Any, Dict, List

DEFAULT_SAMPLE = 'simple_array'

SAMPLES: Dict[str, Dict[str, Any]] = {
    'simple_array': {
        'name': 'Simple array',
        'description': 'A plain array of objects',
        'data': [
            {"name": "John Doe", "age": 30, "city": "Seoul", "active": True},
            {"name": "Jane Smith", "age": 25, "city": "Busan", "active": False},
            {"name": "Bob Johnson", "age": 35, "city": "Incheon", "active": True},
            {"name": "Alice Brown", "age": 28, "city": "Daegu", "active": True},
        ],
    },
    'nested_array': {
        'name': 'Nested objects',
        'description': 'Objects holding nested objects and arrays',
        'data': [
            {
                "id": 1,
                "name": "Product A",
                "price": 29.99,
                "category": {"id": 1, "name": "Electronics"},
                "tags": ["new", "popular", "sale"],
                "inventory": {"stock": 100, "warehouse": "Seoul"},
            },
            {
                "id": 2,
                "name": "Product B",
                "price": 49.99,
                "category": {"id": 2, "name": "Clothing"},
                "tags": ["fashion", "trendy"],
                "inventory": {"stock": 50, "warehouse": "Busan"},
            },
        ],
    },
    'object_data': {
        'name': 'Wrapper object',
        'description': 'An object whose array property holds the rows',
        'data': {
            "users": [
                {"id": 1, "name": "Admin", "role": "administrator", "lastLogin": "2024-01-15"},
                {"id": 2, "name": "User1", "role": "user", "lastLogin": "2024-01-14"},
                {"id": 3, "name": "User2", "role": "user", "lastLogin": "2024-01-13"},
            ],
            "settings": {"theme": "dark", "language": "ko", "notifications": True},
        },
    },
    'mixed_types': {
        'name': 'Mixed types',
        'description': 'Strings, numbers, booleans, nulls, arrays and objects',
        'data': [
            {"string": "Hello World", "number": 42, "boolean": True, "null": None},
            {"string": "안녕하세요", "number": 3.14, "boolean": False, "array": [1, 2, 3]},
            {"string": "Test", "number": -100, "boolean": True, "object": {"key": "value"}},
        ],
    },
    'empty_data': {
        'name': 'Empty',
        'description': 'An empty array',
        'data': [],
    },
    'single_object': {
        'name': 'Single object',
        'description': 'One flat object shown as key/value rows',
        'data': {
            "title": "Sample Document",
            "content": "This is a sample document content.",
            "author": "John Doe",
            "created": "2024-01-15T10:30:00Z",
            "published": True,
        },
    },
}


def get_sample_json(key: str = DEFAULT_SAMPLE) -> str:
    """Pretty JSON text for a sample; unknown keys fall back to the default sample."""
    sample = SAMPLES.get(key, SAMPLES[DEFAULT_SAMPLE])
    return json.dumps(sample['data'], indent=2, ensure_ascii=False)


def list_samples() -> List[Dict[str, str]]:
    return [
        {'key': key, 'name': sample['name'], 'description': sample['description']}
        for key, sample in SAMPLES.items()
    ]
