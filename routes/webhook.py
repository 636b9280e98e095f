from __future__ import annotations
import logging, threading
from flask import Blueprint, request
from config import VERIFY_TOKEN, WEBHOOK_ASYNC
from logic.dispatch import dispatch
from logic.navigation import Navigator

log = logging.getLogger(__name__)
bp = Blueprint("webhook", __name__)

# One navigator per process; its store is the only conversation memory we have.
NAVIGATOR = Navigator()


def _process(payload: dict):
    try:
        dispatch(payload, NAVIGATOR)
    except Exception as e:
        log.exception("Webhook processing failed: %s", e)


@bp.get("/webhook")
def verify():
    # Meta's subscription handshake.
    mode = request.args.get("hub.mode")
    token = request.args.get("hub.verify_token")
    challenge = request.args.get("hub.challenge", "")
    if mode and VERIFY_TOKEN and token == VERIFY_TOKEN:
        log.info("✅ Webhook verified")
        return challenge, 200
    return "", 403


@bp.post("/webhook")
def receive():
    payload = request.get_json(silent=True) or {}
    if not payload.get("object"):
        return "", 200
    try:
        # Ack Meta right away; replies go out on their own.
        if WEBHOOK_ASYNC:
            threading.Thread(target=_process, args=(payload,), daemon=True).start()
        else:
            _process(payload)
    except Exception as e:
        log.exception("Webhook scheduling failed: %s", e)
        return "", 500
    return "", 200
