from __future__ import annotations

import json
from typing import Any, Dict, List

from .flattening import flatten_json


def extract_schema(raw: Any) -> Dict[str, Any]:
    """Turn a raw JSON document into ``{'sample': ..., 'keys': ...}``.

    If the document is a list, its first element is taken as the representative
    record (an empty list yields no keys).
    """
    root = raw
    if isinstance(raw, list):
        root = raw[0] if raw else {}

    sample = flatten_json(root)
    keys: List[str] = sorted(sample)
    return {'sample': sample, 'keys': keys}


def format_sample_value(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, (dict, list)):
        try:
            return json.dumps(value, ensure_ascii=False)
        except TypeError:
            return str(value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)
