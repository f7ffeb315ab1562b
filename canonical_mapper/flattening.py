from __future__ import annotations

from typing import Any, Dict, List, Tuple

ARRAY_SEGMENT = '0'


def child_path(prefix: str, segment: str) -> str:
    return f"{prefix}.{segment}" if prefix else segment


def flatten_json(value: Any, prefix: str = '') -> Dict[str, Any]:
    """Flatten a JSON value into a single-level dict keyed by dot paths.

    Arrays are represented by their first element only (path segment '0');
    an empty array is kept as a leaf whose value is ``[]``. A null value at
    the root with no prefix produces nothing. Nesting depth is not limited by
    the interpreter's recursion limit.
    """
    result: Dict[str, Any] = {}
    stack: List[Tuple[Any, str]] = [(value, prefix)]

    while stack:
        current, path = stack.pop()

        if current is None:
            if path:
                result[path] = None
            continue

        if isinstance(current, (bool, int, float, str)):
            result[path] = current
            continue

        if isinstance(current, list):
            if current:
                stack.append((current[0], child_path(path, ARRAY_SEGMENT)))
            else:
                result[path] = []
            continue

        if isinstance(current, dict):
            # Reversed so keys are visited in order and later keys overwrite
            # earlier ones on a path collision.
            for key, child in reversed(list(current.items())):
                stack.append((child, child_path(path, str(key))))
            continue

        raise TypeError(f"Unsupported JSON value of type {type(current).__name__} at '{path}'")
