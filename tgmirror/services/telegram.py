# tgmirror/services/telegram.py
from __future__ import annotations

from typing import Any, Dict

import requests

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramTransportError(IOError):
    """The Bot API could not be reached or did not answer in time."""


def _post(token: str, endpoint: str, payload: Dict[str, Any], timeout: float = 10) -> Dict[str, Any]:
    """
    POST one Bot API method and return Telegram's JSON envelope.

    Telegram answers API-level failures (bad ids, no rights, flood wait)
    with a JSON body and a 4xx status, so the status code is not used to
    decide success: the envelope's `ok` field is. Transport failures raise
    TelegramTransportError.
    """
    url = f"{TELEGRAM_API_BASE}/bot{token}/{endpoint}"
    try:
        response = requests.post(url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise TelegramTransportError(f"{endpoint}: {e}") from e

    try:
        body = response.json()
    except ValueError:
        return {
            "ok": False,
            "error_code": response.status_code,
            "description": f"non-JSON response: {response.text[:200]}",
        }

    if not isinstance(body, dict):
        return {"ok": False, "error_code": response.status_code, "description": "unexpected response shape"}
    return body


def copy_message(
    token: str,
    chat_id: int | str,
    from_chat_id: int | str,
    message_id: int,
    timeout: float = 10,
) -> Dict[str, Any]:
    """
    Copy one message into another chat.

    Returns the raw envelope, e.g. {"ok": true, "result": {"message_id": 42}}
    or {"ok": false, "error_code": 400, "description": "..."}.
    """
    payload: Dict[str, Any] = {
        "chat_id": chat_id,
        "from_chat_id": from_chat_id,
        "message_id": message_id,
    }
    return _post(token, "copyMessage", payload, timeout=timeout)
