import requests
import logging
from requests.adapters import HTTPAdapter
from config import WHATSAPP_ACCESS_TOKEN, PHONE_NUMBER_ID, GRAPH_API_VERSION, HTTP_TIMEOUT

log = logging.getLogger(__name__)

API_URL = f"https://graph.facebook.com/{GRAPH_API_VERSION}/{PHONE_NUMBER_ID}/messages"

# Reusing one session so Graph isn't opening a new connection per reply.
_session = requests.Session()
_session.headers.update({"Authorization": f"Bearer {WHATSAPP_ACCESS_TOKEN}", "Content-Type": "application/json"})
_session.mount("https://", HTTPAdapter(pool_connections=20, pool_maxsize=20))


def send_message(to: str, text: str) -> bool:
    """Push a plain text message to a WhatsApp user.

    Best effort: a failed send is logged and dropped. There is no retry and
    nobody to tell, since the channel we would report on is the one that
    failed.
    """
    payload = {
        "messaging_product": "whatsapp",
        "to": to,
        "type": "text",
        "text": {"body": text},
    }
    try:
        r = _session.post(API_URL, json=payload, timeout=HTTP_TIMEOUT)
    except requests.RequestException as e:
        log.error("❌ WhatsApp send to %s failed: %s", to, e)
        return False
    if not r.ok:
        log.error("❌ WhatsApp send to %s -> %s %s", to, r.status_code, r.text[:800])
        return False
    return True
