from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Optional, Union

from .errors import CanonicalMapperError, StorageCorrupt, StorageError
from .logging_config import get_logger
from .models import Dataset
from .serializer import dumps_dataset, loads_dataset

logger = get_logger(__name__)

STORAGE_KEY = 'canonical-mapper-v1'


class MemoryStorage:
    """Keeps the last saved snapshot in memory."""

    def __init__(self, dataset: Optional[Dataset] = None):
        self._snapshot = copy.deepcopy(dataset)
        self.save_count = 0

    def load(self) -> Optional[Dataset]:
        return copy.deepcopy(self._snapshot)

    def save(self, dataset: Dataset) -> None:
        self._snapshot = copy.deepcopy(dataset)
        self.save_count += 1


class JsonFileStorage:
    """One JSON snapshot file, fully overwritten on every save."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[Dataset]:
        """Return the saved dataset, or None when nothing usable is stored.

        A snapshot that cannot be read back is logged and treated as absent.
        """
        if not self.path.exists():
            return None
        try:
            return self._read_snapshot()
        except StorageCorrupt as exc:
            cause = exc.__cause__
            logger.error(
                "storage_corrupt",
                path=str(self.path),
                error_type=type(cause).__name__ if cause else type(exc).__name__,
                error_message=str(exc),
            )
            return None

    def _read_snapshot(self) -> Dataset:
        try:
            text = self.path.read_bytes()
        except OSError as exc:
            raise StorageCorrupt(f"Could not read {self.path}: {exc}") from exc
        try:
            return loads_dataset(text)
        except CanonicalMapperError as exc:
            raise StorageCorrupt(f"Saved session at {self.path} is unreadable: {exc}") from exc

    def save(self, dataset: Dataset) -> None:
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(dumps_dataset(dataset), encoding='utf-8')
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.error("storage_save_failed", path=str(self.path), error_message=str(exc))
            raise StorageError(f"Could not save session to {self.path}: {exc}") from exc
