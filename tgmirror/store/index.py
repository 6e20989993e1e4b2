# tgmirror/store/index.py
from __future__ import annotations

import threading
from typing import Any, List, Optional, Tuple

from tgmirror.mirror.models import InvalidRecordError, MediaRecord
from tgmirror.mirror.validator import validate_record

from .base import Storage

CURSOR_PREFIX = "cursor:"


def cursor_key(channel: str) -> str:
    return f"{CURSOR_PREFIX}{channel}"


class MediaIndex:
    """
    Dedup index: file_unique_id -> MediaRecord, plus `cursor:<chat>` -> int.

    The index is the only writer of its storage. Each call holds the lock
    for its whole read/modify/write, so operations on the same key never
    interleave. There is no transaction spanning two keys.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Raw contract
    # ------------------------------------------------------------------ #
    def has(self, key: str) -> bool:
        with self._lock:
            return self._storage.contains(key)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._storage.get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._storage.put(key, value)

    def dump(self) -> List[Tuple[str, Any]]:
        with self._lock:
            return self._storage.items()

    # ------------------------------------------------------------------ #
    # Media records
    # ------------------------------------------------------------------ #
    def get_record(self, key: str) -> Optional[MediaRecord]:
        raw = self.get(key)
        if raw is None:
            return None
        return MediaRecord.from_dict(raw)

    def put_record(self, record: MediaRecord) -> None:
        data = record.to_dict()
        ok, err = validate_record(data)
        if not ok:
            raise InvalidRecordError(err)
        self.put(record.key, data)

    # ------------------------------------------------------------------ #
    # Backfill cursors
    # ------------------------------------------------------------------ #
    def get_cursor(self, channel: str, default: int) -> int:
        raw = self.get(cursor_key(channel))
        if raw is None:
            return default
        return int(raw)

    def put_cursor(self, channel: str, position: int) -> None:
        self.put(cursor_key(channel), max(int(position), 0))
