from __future__ import annotations

import json
import os
import tempfile
from typing import Any

from .errors import InvalidInput


def parse_json_text(content: Any) -> Any:
    """Parse JSON text or bytes; a UTF-8 byte-order mark is accepted."""
    if isinstance(content, bytes):
        try:
            content = content.decode('utf-8-sig')
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"File is not UTF-8 text: {exc}") from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise InvalidInput(f"Invalid JSON: {exc}") from exc


def read_json_content(file_obj) -> Any:
    """Read JSON content from an uploaded file or file path."""
    if file_obj is None:
        raise InvalidInput("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        return parse_json_text(file_obj.read())

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'rb') as f:
        return parse_json_text(f.read())


def upload_file_name(file_obj) -> str:
    if file_obj is None:
        return ''
    path = file_obj.name if hasattr(file_obj, 'name') else str(file_obj)
    return os.path.basename(path)


def write_temp_file(file_name: str, content: str) -> str:
    path = os.path.join(tempfile.gettempdir(), file_name)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)
    return path
