from __future__ import annotations

from typing import Any, Dict, List, Optional

from .errors import DuplicateName
from .logging_config import get_logger
from .models import (
    CanonicalField,
    Dataset,
    Provider,
    build_canonical_field,
    build_provider,
    empty_dataset,
    find_field,
    mappings_of,
    provider_ids,
)

logger = get_logger(__name__)

# Passing UNSET as a mapping key clears the mapping.
UNSET = None


def _without_mapping(field: Dict[str, Any], provider_id: str) -> Dict[str, Any]:
    mappings = mappings_of(field)
    if provider_id not in mappings:
        return field
    remaining = {pid: key for pid, key in mappings.items() if pid != provider_id}
    return {**field, 'mappings': remaining}


def _replace_field(dataset: Dataset, field_id: str, updated: Dict[str, Any]) -> Dataset:
    fields = [
        updated if isinstance(f, dict) and f.get('id') == field_id else f
        for f in dataset['canonicalFields']
    ]
    return {**dataset, 'canonicalFields': fields}


class MappingStore:
    """Owns the current Dataset and applies atomic mutations to it.

    Every mutation builds a new Dataset from the previous one and only swaps it
    in once the new snapshot has been handed to the storage collaborator, so a
    failed operation leaves the current Dataset untouched. Records are shared
    between successive Dataset values; treat ``store.dataset`` as read-only.
    """

    def __init__(self, dataset: Optional[Dataset] = None, storage=None):
        self._dataset: Dataset = dataset if dataset is not None else empty_dataset()
        self._storage = storage

    @classmethod
    def from_storage(cls, storage) -> 'MappingStore':
        dataset = storage.load()
        if dataset is None:
            logger.info("session_started_empty")
        else:
            logger.info(
                "session_restored",
                providers=len(dataset['providers']),
                canonical_fields=len(dataset['canonicalFields']),
            )
        return cls(dataset, storage)

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def _commit(self, dataset: Dataset) -> Dataset:
        if self._storage is not None:
            self._storage.save(dataset)
        self._dataset = dataset
        return dataset

    def rename_dataset(self, name: str) -> Dataset:
        return self._commit({**self._dataset, 'name': name})

    def add_provider(self, name: str, raw: Any) -> Provider:
        current = self._dataset
        if name in self.provider_names():
            logger.warning("provider_name_rejected", name=name)
            raise DuplicateName(name)

        provider = build_provider(name, raw)
        self._commit({**current, 'providers': [*current['providers'], provider]})
        logger.info(
            "provider_added",
            provider_id=provider['id'],
            name=name,
            attribute_count=len(provider['flatKeys']),
        )
        return provider

    def remove_provider(self, provider_id: str) -> Dataset:
        current = self._dataset
        providers = [
            p for p in current['providers']
            if not (isinstance(p, dict) and p.get('id') == provider_id)
        ]
        fields = [
            _without_mapping(f, provider_id) if isinstance(f, dict) else f
            for f in current['canonicalFields']
        ]
        unchanged = len(providers) == len(current['providers']) and all(
            new is old for new, old in zip(fields, current['canonicalFields'])
        )
        if unchanged:
            return current

        logger.info("provider_removed", provider_id=provider_id)
        return self._commit({**current, 'providers': providers, 'canonicalFields': fields})

    def add_canonical_field(self) -> CanonicalField:
        current = self._dataset
        field = build_canonical_field()
        self._commit({**current, 'canonicalFields': [*current['canonicalFields'], field]})
        logger.info("canonical_field_added", field_id=field['id'])
        return field

    def rename_canonical_field(self, field_id: str, name: str) -> Dataset:
        current = self._dataset
        field = find_field(current, field_id)
        if field is None:
            return current
        return self._commit(_replace_field(current, field_id, {**field, 'name': name}))

    def remove_canonical_field(self, field_id: str) -> Dataset:
        current = self._dataset
        if find_field(current, field_id) is None:
            return current

        fields = [
            f for f in current['canonicalFields']
            if not (isinstance(f, dict) and f.get('id') == field_id)
        ]
        logger.info("canonical_field_removed", field_id=field_id)
        return self._commit({**current, 'canonicalFields': fields})

    def set_mapping(self, field_id: str, provider_id: str, key: Optional[str]) -> Dataset:
        """Map a canonical field to one provider attribute, or clear it with UNSET.

        The key is not checked against the provider's attributes. Unknown field
        or provider ids leave the dataset unchanged.
        """
        current = self._dataset
        field = find_field(current, field_id)
        if field is None:
            return current
        if provider_id not in provider_ids(current):
            logger.debug("mapping_ignored_unknown_provider", field_id=field_id, provider_id=provider_id)
            return current

        if key is UNSET:
            updated = _without_mapping(field, provider_id)
            if updated is field:
                return current
        else:
            updated = {**field, 'mappings': {**mappings_of(field), provider_id: key}}

        logger.debug("mapping_updated", field_id=field_id, provider_id=provider_id, key=key)
        return self._commit(_replace_field(current, field_id, updated))

    def reset(self) -> Dataset:
        logger.info("session_reset")
        return self._commit(empty_dataset())

    def replace(self, dataset: Dataset) -> Dataset:
        logger.info(
            "dataset_replaced",
            name=dataset.get('name', ''),
            providers=len(dataset['providers']),
            canonical_fields=len(dataset['canonicalFields']),
        )
        return self._commit(dataset)

    def provider_names(self) -> List[str]:
        return [p.get('name') for p in self._dataset['providers'] if isinstance(p, dict)]
