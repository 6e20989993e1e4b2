from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from tgmirror.services.telegram import copy_message
from tgmirror.store import MediaIndex, TaskQueue

from .backfill import BackfillEnumerator
from .models import InvalidTaskError, LiveTask, Task, copy_payload, task_to_dict

CopyFn = Callable[..., Dict[str, Any]]


class Sender:
    """
    Sends one task through copyMessage.

    A rejected copy is logged and dropped: no retry, no requeue. A successful
    live copy stores the new message_id on the matching MediaRecord.
    """

    def __init__(
        self,
        index: MediaIndex,
        token: Optional[str],
        timeout: float = 10,
        copy_fn: CopyFn = copy_message,
    ) -> None:
        self.index = index
        self.token = token
        self.timeout = timeout
        self._copy = copy_fn

    def send(self, task: Task) -> bool:
        if not self.token:
            logging.error("[SEND] BOT_TOKEN is not set; dropping %s task", task.kind)
            return False

        response = self._copy(self.token, timeout=self.timeout, **copy_payload(task))

        if not response.get("ok"):
            self._log_rejection(task, response)
            return False

        result = response.get("result") or {}
        target_ref = result.get("message_id")
        logging.info(
            "[SEND] copied %s:%s -> %s as %s",
            task.source_channel,
            task.source_message_id,
            task.destination_channel,
            target_ref,
        )

        if isinstance(task, LiveTask):
            if target_ref is None:
                logging.warning("[SEND] copy of %s returned no message_id; record left unchanged", task.key)
            else:
                self._mark_mirrored(task.key, target_ref)
        return True

    def _mark_mirrored(self, key: str, target_ref: int) -> None:
        record = self.index.get_record(key)
        if record is None:
            logging.warning("[SEND] no media record for %s; target ref %s not stored", key, target_ref)
            return
        record.target_message_ref = target_ref
        self.index.put_record(record)

    @staticmethod
    def _log_rejection(task: Task, response: Dict[str, Any]) -> None:
        code = response.get("error_code")
        description = response.get("description")
        params = response.get("parameters") or {}
        if code == 429:
            logging.warning(
                "[SEND] rate limited on %s:%s (retry_after=%s); task dropped",
                task.source_channel,
                task.source_message_id,
                params.get("retry_after"),
            )
            return
        logging.warning(
            "[SEND] copy of %s:%s rejected (%s %s); task dropped",
            task.source_channel,
            task.source_message_id,
            code,
            description,
        )


@dataclass
class TickResult:
    backfilled: int = 0
    task: Optional[Task] = None
    sent: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backfilled": self.backfilled,
            "task": task_to_dict(self.task) if self.task is not None else None,
            "sent": self.sent,
        }


class Dispatcher:
    """
    Effect of one scheduling tick: run backfill, then send at most one task.

    The caller's schedule is the only rate limit, so ticks must not overlap.
    """

    def __init__(self, queue: TaskQueue, enumerator: BackfillEnumerator, sender: Sender) -> None:
        self.queue = queue
        self.enumerator = enumerator
        self.sender = sender

    def on_tick(self) -> TickResult:
        result = TickResult()
        result.backfilled = self.enumerator.run()

        try:
            task = self.queue.pop()
        except InvalidTaskError as e:
            logging.error("[TICK] dropped corrupted queue entry: %s", e)
            return result

        if task is None:
            logging.debug("[TICK] queue empty")
            return result

        result.task = task
        result.sent = self.sender.send(task)
        return result
