from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union

from .validator import validate_record, validate_task

ChatId = Union[int, str]


class InvalidTaskError(ValueError):
    """A task dict does not match the task schema."""


class InvalidRecordError(ValueError):
    """A media record dict does not match the record schema."""


@dataclass
class MediaRecord:
    """
    One mirrored media item, keyed by Telegram's file_unique_id.

    Fields:
        key: file_unique_id, the dedup key.
        source_channel: chat the item was first seen in.
        transferable_id: file_id, usable to re-send the file.
        display_name: file name, or the key when Telegram sends none.
        size_bytes / mime_type: best-effort metadata.
        captured_at: ISO-8601 UTC time of the original message.
        target_message_ref: message_id of the copy in the target chat,
            None until a send succeeds.
    """

    key: str
    source_channel: ChatId
    transferable_id: Optional[str] = None
    display_name: Optional[str] = None
    size_bytes: Optional[int] = None
    mime_type: Optional[str] = None
    captured_at: Optional[str] = None
    target_message_ref: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "MediaRecord":
        ok, err = validate_record(raw)
        if not ok:
            raise InvalidRecordError(err)
        return cls(**raw)


@dataclass(frozen=True)
class LiveTask:
    key: str
    destination_channel: ChatId
    source_channel: ChatId
    source_message_id: int

    kind = "live"


@dataclass(frozen=True)
class BackfillTask:
    destination_channel: ChatId
    source_channel: ChatId
    source_message_id: int

    kind = "backfill"


Task = Union[LiveTask, BackfillTask]

_TASK_TYPES = {
    "live": LiveTask,
    "backfill": BackfillTask,
}


def task_to_dict(task: Task) -> Dict[str, Any]:
    d = asdict(task)
    d["kind"] = task.kind
    return d


def task_from_dict(raw: Any) -> Task:
    """
    Rebuild a task from its stored dict. Raises InvalidTaskError when the
    dict is not a valid live or backfill task.
    """
    ok, err = validate_task(raw)
    if not ok:
        raise InvalidTaskError(err)
    fields = dict(raw)
    cls = _TASK_TYPES[fields.pop("kind")]
    return cls(**fields)


def copy_payload(task: Task) -> Dict[str, Any]:
    """Body of the copyMessage request for one task."""
    return {
        "chat_id": task.destination_channel,
        "from_chat_id": task.source_channel,
        "message_id": task.source_message_id,
    }
