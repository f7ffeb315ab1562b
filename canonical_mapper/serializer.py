from __future__ import annotations

import csv
import io
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .errors import FormatError
from .io_utils import parse_json_text
from .models import Dataset, iter_records, mappings_of


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T10:20:30.123Z."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def export_dataset(dataset: Dataset, exported_at: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        'name': dataset.get('name', ''),
        'providers': dataset['providers'],
        'canonicalFields': dataset['canonicalFields'],
        'exportedAt': format_timestamp(exported_at),
    }


def import_dataset(document: Any) -> Dataset:
    """Build a Dataset from an exported document.

    Only the presence and list type of ``providers`` and ``canonicalFields`` are
    checked; individual records are taken as-is and ids are kept verbatim.
    """
    if not isinstance(document, dict):
        raise FormatError('providers')

    providers = document.get('providers')
    if not isinstance(providers, list):
        raise FormatError('providers')

    fields = document.get('canonicalFields')
    if not isinstance(fields, list):
        raise FormatError('canonicalFields')

    return {
        'name': document.get('name', ''),
        'providers': list(providers),
        'canonicalFields': list(fields),
    }


def dumps_dataset(dataset: Dataset, indent: int = 2) -> str:
    return json.dumps(export_dataset(dataset), indent=indent, ensure_ascii=False)


def loads_dataset(text: Any) -> Dataset:
    return import_dataset(parse_json_text(text))


def export_mapping_csv(dataset: Dataset) -> str:
    """Mapping matrix as CSV: one column per provider, one row per canonical field."""
    providers = list(iter_records(dataset.get('providers')))
    headers: List[str] = ['Canonical'] + [str(p.get('name', '')) for p in providers]

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(headers)
    for field in iter_records(dataset.get('canonicalFields')):
        mappings = mappings_of(field)
        row = [field.get('name', '')]
        row.extend(mappings.get(p.get('id')) or '' for p in providers)
        writer.writerow(row)
    return buffer.getvalue()


def export_file_stem(dataset: Dataset) -> str:
    name = dataset.get('name') or ''
    stem = re.sub(r'[^\w\- ]', '_', name).strip() if isinstance(name, str) else ''
    return stem or 'dataset'
