import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import requests

from services import whatsapp


class Resp:
    def __init__(self, ok=True, status_code=200, text="{}"):
        self.ok = ok
        self.status_code = status_code
        self.text = text


def test_send_message_posts_text_payload(monkeypatch):
    captured = {}

    def fake_post(url, json, timeout):
        captured.update(url=url, json=json)
        return Resp()

    monkeypatch.setattr(whatsapp._session, "post", fake_post)
    assert whatsapp.send_message("569111", "hola") is True
    assert captured["url"] == whatsapp.API_URL
    assert captured["json"] == {
        "messaging_product": "whatsapp",
        "to": "569111",
        "type": "text",
        "text": {"body": "hola"},
    }


def test_send_message_swallows_http_errors(monkeypatch, caplog):
    monkeypatch.setattr(whatsapp._session, "post", lambda *a, **k: Resp(ok=False, status_code=401, text="bad token"))
    assert whatsapp.send_message("569111", "hola") is False
    assert "bad token" in caplog.text


def test_send_message_swallows_transport_errors(monkeypatch):
    def boom(*a, **k):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(whatsapp._session, "post", boom)
    assert whatsapp.send_message("569111", "hola") is False
