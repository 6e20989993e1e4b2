from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from tgmirror.store import MediaIndex, TaskQueue
from tgmirror.utils.time import from_unix

from .models import ChatId, LiveTask, MediaRecord

# Update fields that can carry a message, in lookup order.
MESSAGE_FIELDS = ("message", "channel_post", "edited_message", "edited_channel_post")

# Media fields in priority order. `photo` is a list of sizes; the last one
# is the largest.
MEDIA_FIELDS = (
    "document",
    "video",
    "audio",
    "photo",
    "voice",
    "animation",
    "video_note",
    "sticker",
)

# Outcomes returned to the webhook
NO_MESSAGE = "no_message"
NO_MEDIA = "no_media"
MALFORMED = "malformed"
DUPLICATE = "duplicate"
QUEUED = "queued"
ERROR = "error"


def extract_message(update: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for name in MESSAGE_FIELDS:
        msg = update.get(name)
        if isinstance(msg, dict):
            return msg
    return None


def extract_media(message: Dict[str, Any]) -> Optional[Tuple[str, Dict[str, Any]]]:
    """
    Return (field_name, media_object) for the first media field present,
    or None for messages without supported media.
    """
    for name in MEDIA_FIELDS:
        media = message.get(name)
        if name == "photo":
            if isinstance(media, list) and media and isinstance(media[-1], dict):
                return name, media[-1]
            continue
        if isinstance(media, dict):
            return name, media
    return None


def build_record(message: Dict[str, Any], media: Dict[str, Any]) -> MediaRecord:
    key = media["file_unique_id"]
    size = media.get("file_size")
    return MediaRecord(
        key=key,
        source_channel=message["chat"]["id"],
        transferable_id=media.get("file_id"),
        display_name=media.get("file_name") or key,
        size_bytes=size if isinstance(size, int) and not isinstance(size, bool) else None,
        mime_type=media.get("mime_type"),
        captured_at=from_unix(message.get("date")),
    )


class IngestHandler:
    """
    Turns one Telegram update into at most one live task.

    Never raises: every outcome, including internal failures, comes back as
    an outcome string so the webhook can always acknowledge the update.
    """

    def __init__(self, index: MediaIndex, queue: TaskQueue, destination: ChatId | None) -> None:
        self.index = index
        self.queue = queue
        self.destination = destination

    def handle(self, update: Dict[str, Any]) -> str:
        message = extract_message(update) if isinstance(update, dict) else None
        if message is None:
            return NO_MESSAGE

        found = extract_media(message)
        if found is None:
            return NO_MEDIA
        media_type, media = found

        chat = message.get("chat") or {}
        key = media.get("file_unique_id")
        message_id = message.get("message_id")
        if not isinstance(key, str) or not key or chat.get("id") is None or not isinstance(message_id, int):
            logging.info("[INGEST] malformed %s update ignored", media_type)
            return MALFORMED

        if self.destination is None:
            logging.error("[INGEST] TARGET_CHAT is not set; %s not queued", key)
            return ERROR

        record_written = False
        try:
            if self.index.has(key):
                logging.info("[INGEST] duplicate %s %s", media_type, key)
                return DUPLICATE

            self.index.put_record(build_record(message, media))
            record_written = True

            self.queue.push(
                LiveTask(
                    key=key,
                    destination_channel=self.destination,
                    source_channel=chat["id"],
                    source_message_id=message_id,
                )
            )
        except Exception as e:  # noqa: BLE001
            if record_written:
                logging.exception("[INGEST ORPHAN] record %s written but task not queued: %s", key, e)
            else:
                logging.exception("[INGEST ERROR] %s: %s", key, e)
            return ERROR

        logging.info("[INGEST] queued %s %s from %s:%s", media_type, key, chat["id"], message_id)
        return QUEUED
