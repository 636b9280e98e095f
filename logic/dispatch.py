from __future__ import annotations
import logging
from logic.navigation import Navigator, is_greeting

log = logging.getLogger(__name__)


def extract_messages(payload: dict) -> list[tuple[str, str]]:
    """(sender, text) pairs from a WhatsApp Cloud API webhook body.

    Meta nests messages as ``entry[].changes[].value.messages[]``. Non-text
    messages (stickers, images, ...) come through with an empty text so the
    navigator answers them with the usual fallback.
    """
    out: list[tuple[str, str]] = []
    for entry in payload.get("entry") or []:
        for change in entry.get("changes") or []:
            value = change.get("value") or {}
            for msg in value.get("messages") or []:
                sender = msg.get("from")
                if not sender:
                    continue
                text = ((msg.get("text") or {}).get("body") or "").strip()
                out.append((sender, text))
    return out


def dispatch(payload: dict, navigator: Navigator) -> int:
    handled = 0
    for sender, text in extract_messages(payload):
        log.info("📩 Message from %s: %r", sender, text)
        try:
            if is_greeting(text):
                navigator.on_greeting(sender)
            else:
                navigator.on_message(sender, text)
            handled += 1
        except Exception as e:
            log.exception("Handling message from %s failed: %s", sender, e)
    return handled
