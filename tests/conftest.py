# TG Mirror test fixtures
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tgmirror.config import Settings  # noqa: E402
from tgmirror.main import create_app  # noqa: E402
from tgmirror.mirror.pipeline import build_pipeline  # noqa: E402
from tgmirror.store import MediaIndex, MemoryStorage, TaskQueue  # noqa: E402

TARGET = "-100999"


class FakeCopy:
    """Stands in for services.telegram.copy_message and records every call."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Dict[str, Any]] = []
        self._next_id = 500

    def fail_next(self, code: int = 400, description: str = "Bad Request: message to copy not found", **extra: Any) -> None:
        self.responses.append({"ok": False, "error_code": code, "description": description, **extra})

    def __call__(self, token: str, chat_id: Any, from_chat_id: Any, message_id: int, timeout: float = 10) -> Dict[str, Any]:
        self.calls.append(
            {"token": token, "chat_id": chat_id, "from_chat_id": from_chat_id, "message_id": message_id}
        )
        if self.responses:
            return self.responses.pop(0)
        self._next_id += 1
        return {"ok": True, "result": {"message_id": self._next_id}}


class FailingStorage(MemoryStorage):
    """MemoryStorage whose writes blow up, for partial-write scenarios."""

    def put(self, key: str, value: Any) -> None:
        raise OSError("disk on fire")


def document_update(unique_id: str = "abc", chat_id: int = -100123, message_id: int = 7, **doc: Any) -> Dict[str, Any]:
    document = {
        "file_id": f"BQAC-{unique_id}",
        "file_unique_id": unique_id,
        "file_name": "report.pdf",
        "file_size": 2048,
        "mime_type": "application/pdf",
    }
    document.update(doc)
    return {
        "update_id": 1,
        "message": {
            "message_id": message_id,
            "date": 1700000000,
            "chat": {"id": chat_id, "type": "channel"},
            "document": document,
        },
    }


@pytest.fixture()
def settings() -> Settings:
    return Settings(target_chat=TARGET, bot_token="123:TEST")


@pytest.fixture()
def index() -> MediaIndex:
    return MediaIndex(MemoryStorage())


@pytest.fixture()
def queue() -> TaskQueue:
    return TaskQueue(MemoryStorage())


@pytest.fixture()
def fake_copy() -> FakeCopy:
    return FakeCopy()


@pytest.fixture()
def pipeline(settings: Settings, fake_copy: FakeCopy):
    return build_pipeline(settings, MemoryStorage(), MemoryStorage(), copy_fn=fake_copy)


@pytest.fixture()
def client(pipeline):
    app = create_app(pipeline=pipeline)
    app.config["TESTING"] = True
    return app.test_client()
