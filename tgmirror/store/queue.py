# tgmirror/store/queue.py
from __future__ import annotations

import threading
from typing import List, Optional

from tgmirror.mirror.models import InvalidTaskError, Task, task_from_dict, task_to_dict
from tgmirror.mirror.validator import validate_task

from .base import Storage

# The whole queue lives under one well-known slot.
QUEUE_SLOT = "q"


class TaskQueue:
    """
    Durable FIFO of mirror tasks. Live and backfill tasks share one lane.

    push() appends to the tail, pop() removes the head, pop() on an empty
    queue returns None. Each call is a full read/modify/write of the slot
    under the lock.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._lock = threading.Lock()

    def _load(self) -> list:
        return self._storage.get(QUEUE_SLOT) or []

    def push(self, task: Task) -> None:
        data = task_to_dict(task)
        ok, err = validate_task(data)
        if not ok:
            raise InvalidTaskError(err)

        with self._lock:
            q = self._load()
            q.append(data)
            self._storage.put(QUEUE_SLOT, q)

    def pop(self) -> Optional[Task]:
        """
        Remove and return the oldest task, or None when the queue is empty.

        A corrupted head entry is still removed before InvalidTaskError is
        raised, so one bad entry cannot wedge the queue.
        """
        with self._lock:
            q = self._load()
            if not q:
                return None
            head = q.pop(0)
            self._storage.put(QUEUE_SLOT, q)

        return task_from_dict(head)

    def dump(self) -> List[Task]:
        with self._lock:
            q = self._load()
        return [task_from_dict(item) for item in q]

    def __len__(self) -> int:
        with self._lock:
            return len(self._load())
