# tgmirror/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

DEFAULT_BACKFILL_BATCH = 10
DEFAULT_BACKFILL_START = 10_000_000


class ConfigError(ValueError):
    """Raised when an environment variable cannot be turned into a setting."""


def _parse_chats(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [c.strip() for c in raw.split(",") if c.strip()]


def _parse_int(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass
class Settings:
    """
    Runtime settings, read once from the environment.

    Nothing else in the package calls os.getenv; components get the values
    they need through the pipeline that is built from these settings.
    """

    target_chat: Optional[str] = None
    bot_token: Optional[str] = None
    backfill_chats: List[str] = field(default_factory=list)
    backfill_batch: int = DEFAULT_BACKFILL_BATCH
    backfill_start: int = DEFAULT_BACKFILL_START

    storage_backend: str = "memory"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_table: str = "mirror_kv"

    telegram_timeout: float = 10.0
    webhook_secret: Optional[str] = None
    log_level: str = "INFO"
    port: int = 10000

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env

        backend = (env.get("STORAGE_BACKEND") or "memory").strip().lower()
        if backend not in ("memory", "supabase"):
            raise ConfigError(f"STORAGE_BACKEND must be 'memory' or 'supabase', got {backend!r}")

        timeout_raw = env.get("TELEGRAM_TIMEOUT") or "10"
        try:
            timeout = float(timeout_raw)
        except ValueError as e:
            raise ConfigError(f"TELEGRAM_TIMEOUT must be a number, got {timeout_raw!r}") from e

        return cls(
            target_chat=env.get("TARGET_CHAT") or None,
            bot_token=env.get("BOT_TOKEN") or env.get("TELEGRAM_BOT_TOKEN") or None,
            backfill_chats=_parse_chats(env.get("BACKFILL_CHATS")),
            backfill_batch=_parse_int(env, "BACKFILL_BATCH", DEFAULT_BACKFILL_BATCH, 1),
            backfill_start=_parse_int(env, "BACKFILL_START", DEFAULT_BACKFILL_START, 0),
            storage_backend=backend,
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_ANON_KEY") or None,
            supabase_table=env.get("SUPABASE_TABLE") or "mirror_kv",
            telegram_timeout=timeout,
            webhook_secret=env.get("WEBHOOK_SECRET") or None,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            port=_parse_int(env, "PORT", 10000, 1),
        )
