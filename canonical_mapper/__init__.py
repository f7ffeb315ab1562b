"""Core logic for the Canonical Mapper.

The Gradio UI lives in `app.py`. This package contains the pieces that:
- flatten provider JSON into dot-path attributes
- hold the mapping dataset and apply mutations to it
- report which provider attributes are still unmapped
- export/import the dataset as JSON (and the mapping matrix as CSV)
"""
from .errors import (
    CanonicalMapperError,
    DuplicateName,
    FormatError,
    InvalidInput,
    StorageCorrupt,
    StorageError,
)
from .flattening import flatten_json
from .schema_utils import extract_schema
from .serializer import export_dataset, export_mapping_csv, import_dataset
from .store import UNSET, MappingStore
from .unmapped import mapped_count, mapped_set, unmapped

__all__ = [
    "CanonicalMapperError",
    "DuplicateName",
    "FormatError",
    "InvalidInput",
    "StorageCorrupt",
    "StorageError",
    "flatten_json",
    "extract_schema",
    "export_dataset",
    "export_mapping_csv",
    "import_dataset",
    "UNSET",
    "MappingStore",
    "mapped_count",
    "mapped_set",
    "unmapped",
]
