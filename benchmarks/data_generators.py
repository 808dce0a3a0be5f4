"""
Test data generators for jtree benchmarks.

Documents stay inside the grammar jtree reads: the root is always an object
or an array and decimals never use exponent notation. ``PaddedSource``
produces an arbitrarily long document lazily, for streaming measurements.
"""

import json
import random
import string
from typing import Any

_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]
_ESCAPE_PROBABILITY = 0.3


def generate_test_data(data_type: str) -> str:
    """Generates a JSON document of the named shape."""
    generators = {
        "small_object": _generate_small_object,
        "catalog": _generate_catalog,
        "numeric_array": _generate_numeric_array,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]()


DATA_TYPES = [
    "small_object",
    "catalog",
    "numeric_array",
    "nested_structure",
    "string_heavy",
]


class PaddedSource:
    """
    A character source yielding ``[`` + ``padding`` spaces + ``]``.

    Characters are produced on demand, so the source itself never holds
    more than one requested chunk.
    """

    def __init__(self, padding: int) -> None:
        self.total = padding + 2
        self.position = 0

    def read(self, size: int = -1) -> str:
        if size < 0:
            size = self.total - self.position
        end = min(self.total, self.position + size)
        chars = []
        if self.position == 0 and end > 0:
            chars.append("[")
        body_end = min(end, self.total - 1)
        body_start = max(self.position, 1)
        if body_end > body_start:
            chars.append(" " * (body_end - body_start))
        if end == self.total and self.position < self.total:
            chars.append("]")
        self.position = end
        return "".join(chars)


def _generate_small_object() -> str:
    """Generates a small object (< 1KB) covering every scalar kind."""
    data = {
        "id": 12345,
        "account": 9007199254740993,
        "name": "Alice Johnson",
        "active": True,
        "balance": 1234.5,
        "ratio": -0.125,
        "manager": None,
        "tags": ["admin", "ops"],
    }
    return json.dumps(data)


def _generate_catalog() -> str:
    """Generates a product catalog object (> 10KB)."""
    data = {
        "catalog_id": random.randint(1000000, 9999999),
        "currency": random.choice(["USD", "EUR", "GBP"]),
        "products": {
            f"sku_{i:05d}": {
                "title": _random_string(24),
                "price": round(random.uniform(1.0, 500.0), 2),
                "stock": random.randint(0, 10_000),
                "weight_grams": random.randint(10, 5_000_000_000),
                "discontinued": random.random() < 0.1,
                "supplier": None,
                "dimensions": [random.randint(1, 200) for _ in range(3)],
            }
            for i in range(150)
        },
    }
    return json.dumps(data)


def _generate_numeric_array() -> str:
    """Generates an array mixing all four numeric widths."""
    array: list[Any] = []
    for _ in range(500):
        width = random.randint(1, 4)
        if width == 1:
            array.append(random.randint(-(2**31), 2**31 - 1))
        elif width == 2:
            array.append(random.randint(2**31, 2**62))
        elif width == 3:
            array.append(round(random.uniform(0.001, 1000.0), 3))
        else:
            array.append(round(random.uniform(-1000.0, -0.001), 3))
    return json.dumps(array)


def _generate_nested_structure() -> str:
    """Generates a nested structure eight levels deep."""

    def create_nested(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"leaf": _random_string(10)}

        return {
            "depth": depth,
            "label": _random_string(15),
            "children": [create_nested(depth - 1) for _ in range(3)],
            "next": create_nested(depth - 1),
        }

    return json.dumps(create_nested(8))


def _generate_string_heavy() -> str:
    """Generates strings dense with escape sequences."""

    def create_escaped_string() -> str:
        chars = []
        for _ in range(50):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice(_ESCAPES))
            else:
                chars.append(
                    random.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    parts = [
        '{"strings": [',
        ", ".join(f'"{create_escaped_string()}"' for _ in range(100)),
        '], "unicode": [',
        ", ".join(
            f'"code point \\u{random.randint(0x20, 0x7E):04x}"'
            for _ in range(50)
        ),
        "]}",
    ]
    return "".join(parts)


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
