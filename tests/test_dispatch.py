import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from logic.dispatch import dispatch, extract_messages


def _payload(*messages):
    return {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"value": {"messages": list(messages)}}]}],
    }


class RecordingNavigator:
    def __init__(self, fail_for=None):
        self.calls = []
        self.fail_for = fail_for

    def on_greeting(self, user_id):
        self.calls.append(("greeting", user_id))

    def on_message(self, user_id, text):
        if user_id == self.fail_for:
            raise RuntimeError("boom")
        self.calls.append(("message", user_id, text))


def test_extract_messages_reads_sender_and_trimmed_text():
    payload = _payload(
        {"from": "569111", "text": {"body": "  1 "}},
        {"from": "569222", "type": "sticker"},
        {"text": {"body": "no sender"}},
    )
    assert extract_messages(payload) == [("569111", "1"), ("569222", "")]


def test_extract_messages_tolerates_status_only_payloads():
    payload = {"object": "whatsapp_business_account", "entry": [{"changes": [{"value": {"statuses": [{}]}}]}]}
    assert extract_messages(payload) == []
    assert extract_messages({}) == []


def test_dispatch_routes_greetings_and_the_rest():
    nav = RecordingNavigator()
    handled = dispatch(_payload(
        {"from": "a", "text": {"body": "Hola"}},
        {"from": "b", "text": {"body": "2"}},
        {"from": "c", "text": {"body": "Necesito ayuda de Duco"}},
    ), nav)
    assert handled == 3
    assert nav.calls == [("greeting", "a"), ("message", "b", "2"), ("greeting", "c")]


def test_dispatch_keeps_going_after_a_failure():
    nav = RecordingNavigator(fail_for="a")
    handled = dispatch(_payload(
        {"from": "a", "text": {"body": "1"}},
        {"from": "b", "text": {"body": "1"}},
    ), nav)
    assert handled == 1
    assert nav.calls == [("message", "b", "1")]
