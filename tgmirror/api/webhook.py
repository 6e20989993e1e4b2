from __future__ import annotations

import hmac
import logging
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from tgmirror.mirror.pipeline import MirrorPipeline

api = Blueprint("api", __name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def _pipeline() -> MirrorPipeline:
    return current_app.extensions["tgmirror"]


def _secret_ok(expected: str | None) -> bool:
    if not expected:
        return True
    given = request.headers.get(SECRET_HEADER)
    if not given:
        return False
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


@api.route("/", methods=["GET"])
def healthcheck() -> str:
    return "TG Mirror Alive"


@api.route("/webhook", methods=["POST"])
def webhook() -> Any:
    """
    Telegram webhook endpoint.

    Always answers 200 once the caller is authenticated, whatever happened
    inside, so Telegram never redelivers an update because of us.
    """
    pipeline = _pipeline()
    if not _secret_ok(pipeline.settings.webhook_secret):
        logging.warning("[WEBHOOK] rejected request with missing or wrong secret token")
        return jsonify({"ok": False}), 403

    update: Dict[str, Any] = request.get_json(silent=True) or {}

    try:
        status = pipeline.handle_update(update)
    except Exception as e:  # noqa: BLE001
        logging.exception("[WEBHOOK ERROR] %s", e)
        status = "error"

    return jsonify({"ok": True, "status": status})


@api.route("/tick", methods=["POST"])
def tick() -> Any:
    """
    One scheduling tick: backfill, then at most one copyMessage.

    Called by an external cron. Failures are logged and reported in the
    body; the status code stays 200.
    """
    try:
        result = _pipeline().on_tick()
    except Exception as e:  # noqa: BLE001
        logging.exception("[TICK ERROR] %s", e)
        return jsonify({"ok": False, "error": str(e)})

    return jsonify({"ok": True, **result.to_dict()})


@api.route("/debug/dump", methods=["GET"])
def dump() -> Any:
    try:
        snapshot = _pipeline().dump()
    except Exception as e:  # noqa: BLE001
        logging.exception("[DUMP ERROR] %s", e)
        return jsonify({"ok": False, "error": str(e)})

    return jsonify({"ok": True, **snapshot})
