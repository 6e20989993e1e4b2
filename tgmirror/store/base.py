# tgmirror/store/base.py
from __future__ import annotations

from typing import Any, List, Optional, Protocol, Tuple


class StorageError(IOError):
    """Generic I/O failure of a storage backend. Never retried internally."""


class Storage(Protocol):
    """
    Minimal JSON key-value contract shared by every backend.

    Values are plain JSON documents (dict / list / int / str / None).
    `items()` returns pairs ordered by key.
    """

    def get(self, key: str) -> Optional[Any]: ...

    def put(self, key: str, value: Any) -> None: ...

    def contains(self, key: str) -> bool: ...

    def items(self) -> List[Tuple[str, Any]]: ...
