from __future__ import annotations

import logging
from typing import Iterable, List

from tgmirror.store import MediaIndex, TaskQueue

from .models import BackfillTask, ChatId


class BackfillEnumerator:
    """
    Walks each source chat backwards from a persisted cursor.

    Every run pushes up to `batch` backfill tasks per chat (newest first)
    and stores the cursor lowered by the full batch, clamped at 0. A chat
    whose cursor reached 0 stays idle for good.

    Near the floor the cursor still drops by a whole batch even when fewer
    tasks were pushed, so ids between 0 and the last pushed id are skipped.
    """

    def __init__(
        self,
        index: MediaIndex,
        queue: TaskQueue,
        destination: ChatId | None,
        chats: Iterable[str],
        batch: int = 10,
        start: int = 10_000_000,
    ) -> None:
        self.index = index
        self.queue = queue
        self.destination = destination
        self.chats: List[str] = list(chats)
        self.batch = batch
        self.start = start

    def run(self) -> int:
        """Enqueue one batch per configured chat. Returns the number of tasks pushed."""
        if not self.chats:
            return 0
        if self.destination is None:
            logging.warning("[BACKFILL] TARGET_CHAT is not set; skipping backfill")
            return 0

        pushed = 0
        for chat in self.chats:
            pushed += self._run_chat(chat)
        return pushed

    def _run_chat(self, chat: str) -> int:
        cursor = self.index.get_cursor(chat, self.start)
        if cursor <= 0:
            logging.debug("[BACKFILL] %s exhausted", chat)
            return 0

        pushed = 0
        for i in range(self.batch):
            mid = cursor - i
            if mid <= 0:
                break
            self.queue.push(
                BackfillTask(
                    destination_channel=self.destination,
                    source_channel=chat,
                    source_message_id=mid,
                )
            )
            pushed += 1

        new_cursor = max(cursor - self.batch, 0)
        self.index.put_cursor(chat, new_cursor)
        logging.info("[BACKFILL] %s: queued %d, cursor %d -> %d", chat, pushed, cursor, new_cursor)
        return pushed
