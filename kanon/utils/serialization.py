"""Shared serialization utilities.

Converts configuration objects and report records (dataclasses, enums,
sets, compiled patterns) into JSON-serializable primitives. Used by the
configuration layer when writing config files and by the reporters.
"""

import math
import re
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any


def serialize_to_primitives(data: Any) -> Any:
    """Convert complex Python types to JSON-serializable primitives.

    Handles:
    - Primitives (str, int, float, bool, None): returned as-is
    - Enum: converted to value
    - dataclass: converted to dict via asdict()
    - dict: recursively serialize keys and values
    - list/tuple: recursively serialize items
    - set/frozenset: serialized and sorted for stable output
    - compiled regex: its pattern string
    - Objects with to_dict(): use that method
    - Special floats (inf, nan): converted to None

    Args:
        data: Any Python data structure.

    Returns:
        JSON-serializable data (primitives, dicts, lists only).

    Examples:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Limits:
        ...     max_line_length: int
        ...     categories: frozenset
        >>> serialize_to_primitives(Limits(100, frozenset({"spacing", "braces"})))
        {'max_line_length': 100, 'categories': ['braces', 'spacing']}
    """
    if data is None:
        return None

    if isinstance(data, Enum):
        return data.value

    if isinstance(data, (str, int, bool)):
        return data

    if isinstance(data, float):
        if math.isnan(data) or math.isinf(data):
            return None
        return data

    if isinstance(data, re.Pattern):
        return data.pattern

    if is_dataclass(data) and not isinstance(data, type):
        return serialize_to_primitives(asdict(data))

    if isinstance(data, dict):
        return {
            serialize_to_primitives(k): serialize_to_primitives(v)
            for k, v in data.items()
        }

    if isinstance(data, (list, tuple)):
        return [serialize_to_primitives(item) for item in data]

    if isinstance(data, (set, frozenset)):
        return sorted(
            (serialize_to_primitives(item) for item in data),
            key=str,
        )

    if hasattr(data, "to_dict"):
        return serialize_to_primitives(data.to_dict())

    return str(data)
