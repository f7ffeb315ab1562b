from __future__ import annotations

import os
import re
from typing import Any, List, Optional, Tuple

import gradio as gr

from .errors import CanonicalMapperError
from .io_utils import read_json_content, upload_file_name
from .logging_config import get_logger
from .models import Dataset, flat_keys_of, iter_records
from .schema_utils import format_sample_value
from .unmapped import mapped_count, unmapped_report

logger = get_logger(__name__)

UNMAPPED_HEADERS = ["Provider", "Attribute", "Sample Value"]
PROVIDER_HEADERS = ["Provider", "Attributes", "Mapped"]
CONFIRM_HINT = "Tick 'Confirm destructive actions' to continue."


def suggest_provider_name(file_obj, current_name: Optional[str]) -> str:
    """Default the provider name to the uploaded file's stem, lowercased alphanumerics only."""
    if current_name and current_name.strip():
        return current_name
    stem = os.path.splitext(upload_file_name(file_obj))[0].lower()
    return re.sub(r'[^a-z0-9]', '', stem)


def build_unmapped_rows(dataset: Dataset, search_term: Optional[str] = None) -> Tuple[List[List[str]], str]:
    report = unmapped_report(dataset, search_term)
    rows: List[List[str]] = []
    for entry in report['providers']:
        name = str(entry['provider'].get('name', ''))
        for item in entry['unmapped']:
            rows.append([name, item['key'], format_sample_value(item['sample'])])

    total = report['total_unmapped']
    if not report['providers']:
        summary = "No providers added yet. Upload a JSON file to see attributes."
    elif total == 0 and search_term:
        summary = "No matches found."
    elif total == 0:
        summary = "All attributes are mapped."
    else:
        summary = f"{total} unmapped attributes"
    return rows, summary


def build_provider_rows(dataset: Dataset) -> List[List[Any]]:
    return [
        [str(p.get('name', '')), len(flat_keys_of(p)), mapped_count(dataset, p)]
        for p in iter_records(dataset.get('providers'))
    ]


def refresh_views(store, search_term: Optional[str] = None):
    """Recompute every derived view from the store's current dataset.

    Order: dataset state, dataset name, provider selector, provider summary,
    unmapped rows, unmapped summary.
    """
    dataset = store.dataset
    choices = [(str(p.get('name', '')), p.get('id')) for p in iter_records(dataset.get('providers'))]
    unmapped_rows, unmapped_summary = build_unmapped_rows(dataset, search_term)
    return (
        dataset,
        dataset.get('name', ''),
        gr.update(choices=choices, value=None),
        build_provider_rows(dataset),
        unmapped_rows,
        unmapped_summary,
    )


def respond(store, search_term: Optional[str], status: str):
    return (status, *refresh_views(store, search_term))


def add_provider_handler(store, name: Optional[str], file_obj, search_term: Optional[str] = None):
    """Returns status, provider name box, file input, then the refreshed views."""
    name = (name or '').strip()
    if not name:
        return ("Provider name is required.", name, gr.update(), *refresh_views(store, search_term))
    if file_obj is None:
        return ("Please select a JSON file.", name, gr.update(), *refresh_views(store, search_term))

    try:
        raw = read_json_content(file_obj)
        provider = store.add_provider(name, raw)
    except CanonicalMapperError as exc:
        logger.warning("provider_upload_failed", name=name, error_type=type(exc).__name__, error_message=str(exc))
        return (str(exc), name, gr.update(), *refresh_views(store, search_term))

    status = f"Added provider '{name}' with {len(provider['flatKeys'])} attributes."
    return (status, '', None, *refresh_views(store, search_term))


def remove_provider_handler(store, provider_id: Optional[str], confirmed: bool, search_term: Optional[str] = None):
    if not provider_id:
        return respond(store, search_term, "Select a provider to remove.")
    if not confirmed:
        return respond(store, search_term, CONFIRM_HINT)

    try:
        store.remove_provider(provider_id)
    except CanonicalMapperError as exc:
        return respond(store, search_term, str(exc))
    return respond(store, search_term, "Provider and its mappings removed.")


def search_unmapped_handler(store, search_term: Optional[str]):
    return build_unmapped_rows(store.dataset, search_term)


def select_unmapped_attribute(store, search_term: Optional[str], evt: gr.SelectData) -> str:
    """Put the clicked attribute path into the copy box."""
    rows, _ = build_unmapped_rows(store.dataset, search_term)
    index = evt.index[0] if isinstance(evt.index, (list, tuple)) else evt.index
    if not isinstance(index, int) or not 0 <= index < len(rows):
        return ''
    return rows[index][1]
