"""
Persistence layer: a JSON key-value backend and the two single-writer
stores built on it (dedup index and task queue).
"""

from .base import Storage, StorageError
from .index import MediaIndex
from .memory import MemoryStorage
from .queue import TaskQueue

__all__ = [
    "Storage",
    "StorageError",
    "MediaIndex",
    "MemoryStorage",
    "TaskQueue",
]
