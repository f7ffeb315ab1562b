"""Dataset shapes.

Datasets are kept as plain JSON-shaped dicts so that imported documents pass
through untouched. Helpers that read records tolerate hand-edited entries
(missing keys, wrong types) instead of raising.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, TypedDict
from uuid import uuid4

from .schema_utils import extract_schema


class Provider(TypedDict):
    id: str
    name: str
    flatKeys: List[str]
    sampleData: Dict[str, Any]


class CanonicalField(TypedDict):
    id: str
    name: str
    mappings: Dict[str, str]


class Dataset(TypedDict):
    name: str
    providers: List[Provider]
    canonicalFields: List[CanonicalField]


def new_id() -> str:
    return str(uuid4())


def empty_dataset(name: str = '') -> Dataset:
    return {'name': name, 'providers': [], 'canonicalFields': []}


def build_provider(name: str, raw: Any) -> Provider:
    schema = extract_schema(raw)
    return {
        'id': new_id(),
        'name': name,
        'flatKeys': schema['keys'],
        'sampleData': schema['sample'],
    }


def build_canonical_field(name: str = '') -> CanonicalField:
    return {'id': new_id(), 'name': name, 'mappings': {}}


def iter_records(items: Any) -> Iterator[Dict[str, Any]]:
    """Yield only the dict entries of a provider/field sequence."""
    if not isinstance(items, list):
        return
    for item in items:
        if isinstance(item, dict):
            yield item


def mappings_of(field: Dict[str, Any]) -> Dict[str, str]:
    mappings = field.get('mappings')
    return mappings if isinstance(mappings, dict) else {}


def flat_keys_of(provider: Dict[str, Any]) -> List[str]:
    keys = provider.get('flatKeys')
    if not isinstance(keys, list):
        return []
    return [k for k in keys if isinstance(k, str)]


def sample_of(provider: Dict[str, Any]) -> Dict[str, Any]:
    sample = provider.get('sampleData')
    return sample if isinstance(sample, dict) else {}


def find_field(dataset: Dataset, field_id: str) -> Optional[CanonicalField]:
    for field in iter_records(dataset.get('canonicalFields')):
        if field.get('id') == field_id:
            return field
    return None


def provider_ids(dataset: Dataset) -> List[str]:
    return [p.get('id') for p in iter_records(dataset.get('providers'))]


def is_empty(dataset: Dataset) -> bool:
    return not dataset.get('providers') and not dataset.get('canonicalFields')
