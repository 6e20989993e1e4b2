# TG Mirror test scripts
from __future__ import annotations

import pytest

from tgmirror.config import ConfigError, Settings


def test_defaults_from_empty_env() -> None:
    s = Settings.from_env({})
    assert s.target_chat is None
    assert s.backfill_chats == []
    assert s.backfill_batch == 10
    assert s.backfill_start == 10_000_000
    assert s.storage_backend == "memory"
    assert s.supabase_table == "mirror_kv"


def test_backfill_chats_are_split_and_trimmed() -> None:
    s = Settings.from_env({"BACKFILL_CHATS": " @one, -1002 ,,@three "})
    assert s.backfill_chats == ["@one", "-1002", "@three"]


def test_token_alias() -> None:
    assert Settings.from_env({"TELEGRAM_BOT_TOKEN": "t"}).bot_token == "t"
    assert Settings.from_env({"BOT_TOKEN": "a", "TELEGRAM_BOT_TOKEN": "b"}).bot_token == "a"


@pytest.mark.parametrize(
    "env",
    [
        {"BACKFILL_BATCH": "ten"},
        {"BACKFILL_BATCH": "0"},
        {"BACKFILL_START": "-1"},
        {"STORAGE_BACKEND": "redis"},
        {"TELEGRAM_TIMEOUT": "soon"},
    ],
)
def test_bad_values_raise(env) -> None:
    with pytest.raises(ConfigError):
        Settings.from_env(env)
