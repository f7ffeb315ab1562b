from __future__ import annotations

from typing import Any, Dict, List, Optional, Set

from .models import Dataset, flat_keys_of, iter_records, mappings_of, sample_of


def mapped_set(dataset: Dataset, provider: Dict[str, Any]) -> Set[str]:
    """Provider attributes referenced by at least one canonical field.

    References to paths that are not among the provider's attributes are
    left out, so the result is always a subset of ``flatKeys``. A hand-typed
    path that the provider does not have is therefore not counted in the
    provider table's "Mapped" column, unlike a plain count of referenced paths.
    """
    provider_id = provider.get('id')
    referenced: Set[str] = set()
    for field in iter_records(dataset.get('canonicalFields')):
        key = mappings_of(field).get(provider_id)
        if isinstance(key, str):
            referenced.add(key)
    return referenced.intersection(flat_keys_of(provider))


def mapped_count(dataset: Dataset, provider: Dict[str, Any]) -> int:
    return len(mapped_set(dataset, provider))


def unmapped(dataset: Dataset, provider: Dict[str, Any], search_term: Optional[str] = None) -> List[str]:
    mapped = mapped_set(dataset, provider)
    keys = [k for k in flat_keys_of(provider) if k not in mapped]

    if search_term:
        term = search_term.lower()
        keys = [k for k in keys if term in k.lower()]
    return keys


def unmapped_report(dataset: Dataset, search_term: Optional[str] = None) -> Dict[str, Any]:
    """Per-provider unmapped attributes with their sample values."""
    entries: List[Dict[str, Any]] = []
    total = 0
    for provider in iter_records(dataset.get('providers')):
        keys = unmapped(dataset, provider, search_term)
        sample = sample_of(provider)
        entries.append({
            'provider': provider,
            'unmapped': [{'key': k, 'sample': sample.get(k)} for k in keys],
        })
        total += len(keys)
    return {'providers': entries, 'total_unmapped': total}
