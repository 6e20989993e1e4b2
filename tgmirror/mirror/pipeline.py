"""
Mirror pipeline wiring.

Builds the two stores and the components that share them from Settings:

    update → IngestHandler → MediaIndex + TaskQueue
    tick   → Dispatcher → BackfillEnumerator, TaskQueue.pop → Sender

The Flask app and the CLI receive one MirrorPipeline and never touch the
storage backends directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from tgmirror.config import Settings
from tgmirror.store import MediaIndex, MemoryStorage, Storage, TaskQueue

from .backfill import BackfillEnumerator
from .dispatcher import CopyFn, Dispatcher, Sender, TickResult
from .ingest import IngestHandler
from .models import task_to_dict

INDEX_NAMESPACE = "index"
QUEUE_NAMESPACE = "queue"


@dataclass
class MirrorPipeline:
    settings: Settings
    index: MediaIndex
    queue: TaskQueue
    ingest: IngestHandler
    enumerator: BackfillEnumerator
    sender: Sender
    dispatcher: Dispatcher

    def handle_update(self, update: Dict[str, Any]) -> str:
        return self.ingest.handle(update)

    def on_tick(self) -> TickResult:
        return self.dispatcher.on_tick()

    def dump(self) -> Dict[str, Any]:
        """Read-only snapshot of both stores for operators."""
        return {
            "index": [[key, value] for key, value in self.index.dump()],
            "queue": [task_to_dict(t) for t in self.queue.dump()],
        }


def _make_storages(settings: Settings) -> tuple[Storage, Storage]:
    if settings.storage_backend == "supabase":
        from tgmirror.services.supabase import SupabaseStorage, make_client

        client = make_client(settings.supabase_url, settings.supabase_key)
        return (
            SupabaseStorage(client, settings.supabase_table, INDEX_NAMESPACE),
            SupabaseStorage(client, settings.supabase_table, QUEUE_NAMESPACE),
        )
    return MemoryStorage(), MemoryStorage()


def build_pipeline(
    settings: Settings,
    index_storage: Optional[Storage] = None,
    queue_storage: Optional[Storage] = None,
    copy_fn: Optional[CopyFn] = None,
) -> MirrorPipeline:
    """
    Wire a pipeline from settings. Storages and the copyMessage function can
    be passed in (tests do); otherwise they come from the configured backend.
    """
    if index_storage is None or queue_storage is None:
        default_index, default_queue = _make_storages(settings)
        index_storage = index_storage or default_index
        queue_storage = queue_storage or default_queue

    index = MediaIndex(index_storage)
    queue = TaskQueue(queue_storage)

    enumerator = BackfillEnumerator(
        index,
        queue,
        destination=settings.target_chat,
        chats=settings.backfill_chats,
        batch=settings.backfill_batch,
        start=settings.backfill_start,
    )

    sender_kwargs: Dict[str, Any] = {"timeout": settings.telegram_timeout}
    if copy_fn is not None:
        sender_kwargs["copy_fn"] = copy_fn
    sender = Sender(index, settings.bot_token, **sender_kwargs)

    return MirrorPipeline(
        settings=settings,
        index=index,
        queue=queue,
        ingest=IngestHandler(index, queue, destination=settings.target_chat),
        enumerator=enumerator,
        sender=sender,
        dispatcher=Dispatcher(queue, enumerator, sender),
    )
