# store/metadata_store.py
from __future__ import annotations

import logging
import threading
from typing import Optional

from core.errors import CorruptStateError
from core.utils import atomic_write_json, is_blank, path_key, read_json_list
from store.models import MetadataRecord

logger = logging.getLogger(__name__)


class MetadataStore:
    """
    Durable file_path -> MetadataRecord mapping backed by a JSON list.

    Keys are case-insensitive. Every upsert rewrites the whole file
    (temp file + rename) before returning. Reads and writes are serialized
    by a lock: lookups apply their results from a worker thread while the
    edit dialog writes from the GUI thread.
    """

    def __init__(self, path: str):
        self.path = path
        self._cache: dict[str, MetadataRecord] = {}
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: str) -> "MetadataStore":
        store = cls(path)
        store.load()
        return store

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def records(self) -> list[MetadataRecord]:
        with self._lock:
            return list(self._cache.values())

    def get(self, file_path: str) -> Optional[MetadataRecord]:
        if is_blank(file_path):
            return None
        with self._lock:
            return self._cache.get(path_key(file_path))

    def upsert(self, record: MetadataRecord) -> None:
        if is_blank(record.file_path):
            return

        with self._lock:
            updated = dict(self._cache)
            updated[path_key(record.file_path)] = record
            # Only publish the new state once it is on disk.
            self._write(updated)
            self._cache = updated

    def load(self) -> None:
        """
        Replace the in-memory state with the file contents.
        A missing or empty file is an empty store; anything unparseable
        raises CorruptStateError and leaves the current state alone.
        """
        try:
            items = read_json_list(self.path)
        except (OSError, ValueError) as e:
            raise CorruptStateError(self.path, str(e)) from e

        loaded: dict[str, MetadataRecord] = {}
        for i, item in enumerate(items or []):
            try:
                record = MetadataRecord.from_dict(item)
            except ValueError as e:
                raise CorruptStateError(self.path, f"entry {i}: {e}") from e

            if is_blank(record.file_path):
                continue
            loaded[path_key(record.file_path)] = record

        with self._lock:
            self._cache = loaded
        logger.info("Loaded %d metadata record(s) from %s", len(loaded), self.path)

    def _write(self, records: dict[str, MetadataRecord]) -> None:
        atomic_write_json(self.path, [r.to_dict() for r in records.values()])
