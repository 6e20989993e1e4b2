# tgmirror/store/memory.py
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional, Tuple


class MemoryStorage:
    """
    In-process storage: key -> JSON value.

    Fine for tests and for a single instance that can afford to lose its
    queue on restart. Values are deep-copied on the way in and out so a
    caller mutating a returned dict never edits the stored one.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return copy.deepcopy(value)

    def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def contains(self, key: str) -> bool:
        return key in self._data

    def items(self) -> List[Tuple[str, Any]]:
        return [(k, copy.deepcopy(self._data[k])) for k in sorted(self._data)]
