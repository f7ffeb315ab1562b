from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .demo import build_demo_dataset
from .errors import CanonicalMapperError
from .handlers_providers import CONFIRM_HINT, respond
from .io_utils import read_json_content, write_temp_file
from .logging_config import get_logger
from .models import flat_keys_of, is_empty, sample_of
from .serializer import dumps_dataset, export_file_stem, export_mapping_csv, import_dataset
from .store import UNSET

logger = get_logger(__name__)

UNMAPPED_CHOICE = "(unmapped)"


def mapping_choices(provider: Dict[str, Any]) -> List[str]:
    return [UNMAPPED_CHOICE] + flat_keys_of(provider)


def mapping_key_from_choice(choice: Optional[str]) -> Optional[str]:
    # '' is a real attribute path (a scalar document's only key), not a blank choice.
    if choice is None or choice == UNMAPPED_CHOICE:
        return UNSET
    return choice


def sample_preview(provider: Dict[str, Any], key: Optional[str]) -> str:
    if key is None:
        return ''
    return f"Ex: {json.dumps(sample_of(provider).get(key), ensure_ascii=False, default=str)}"


def rename_dataset_handler(store, name: Optional[str], search_term: Optional[str] = None):
    try:
        store.rename_dataset(name or '')
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, '')


def add_canonical_field_handler(store, search_term: Optional[str] = None):
    try:
        store.add_canonical_field()
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, "Canonical field added.")


def rename_canonical_field_handler(store, field_id: str, name: Optional[str], search_term: Optional[str] = None):
    try:
        store.rename_canonical_field(field_id, name or '')
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, '')


def remove_canonical_field_handler(store, field_id: str, search_term: Optional[str] = None):
    try:
        store.remove_canonical_field(field_id)
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, "Canonical field removed.")


def set_mapping_handler(store, field_id: str, provider_id: str, choice: Optional[str], search_term: Optional[str] = None):
    try:
        store.set_mapping(field_id, provider_id, mapping_key_from_choice(choice))
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, '')


def reset_session_handler(store, confirmed: bool, search_term: Optional[str] = None):
    if not confirmed:
        return respond(store, search_term, CONFIRM_HINT)
    try:
        store.reset()
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, "Session cleared.")


def load_demo_handler(store, confirmed: bool, search_term: Optional[str] = None):
    if not is_empty(store.dataset) and not confirmed:
        return respond(store, search_term, f"Loading the demo replaces your current data. {CONFIRM_HINT}")
    try:
        store.replace(build_demo_dataset())
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, "Demo data loaded.")


def import_dataset_handler(store, file_obj, confirmed: bool, search_term: Optional[str] = None):
    if file_obj is None:
        return respond(store, search_term, "No file uploaded.")
    if not is_empty(store.dataset) and not confirmed:
        return respond(store, search_term, f"Importing replaces your current data. {CONFIRM_HINT}")

    try:
        dataset = import_dataset(read_json_content(file_obj))
        store.replace(dataset)
    except CanonicalMapperError as exc:
        logger.warning("dataset_import_failed", error_type=type(exc).__name__, error_message=str(exc))
        return respond(store, search_term, f"Failed to load file: {exc}")
    return respond(store, search_term, f"Imported {len(dataset['providers'])} providers and {len(dataset['canonicalFields'])} canonical fields.")


def export_json_handler(store):
    dataset = store.dataset
    if not dataset['providers']:
        return None, "Add a provider before exporting."
    try:
        path = write_temp_file(f"{export_file_stem(dataset)}.json", dumps_dataset(dataset))
    except OSError as exc:
        return None, f"Error during export: {exc}"
    return path, f"Export successful! Saved to {path}"


def export_csv_handler(store):
    dataset = store.dataset
    if not dataset['canonicalFields']:
        return None, "Define at least one canonical field before exporting CSV."
    try:
        path = write_temp_file(f"{export_file_stem(dataset)}_mapping.csv", export_mapping_csv(dataset))
    except OSError as exc:
        return None, f"Error during export: {exc}"
    return path, f"Export successful! Saved to {path}"
