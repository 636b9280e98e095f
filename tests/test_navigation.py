import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import threading
import time

import pytest

from logic import navigation
from logic.navigation import Navigator, is_greeting, is_menu_command
from logic.state import IDLE, Idle, InCategory, InMemoryConversationStore
import ui

USER = "56911112222"


@pytest.fixture
def aranceles(db):
    db.add_category(1, "Aranceles")
    db.add_question(11, 1, "¿Cuándo se paga?", "Antes del día 5.")
    db.add_question(12, 1, "¿Dónde se paga?", "En tesorería.")
    return db


class CountingStore(InMemoryConversationStore):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def set(self, user_id, state):
        self.writes += 1
        super().set(user_id, state)


def test_is_greeting():
    assert is_greeting("Hola")
    assert is_greeting("  HI ")
    assert is_greeting("hola, necesito ayuda")
    assert is_greeting("quiero hablar con DucoChat")
    assert not is_greeting("hola que tal")
    assert not is_greeting("")
    assert not is_greeting("1")


def test_is_menu_command_accepts_both_spellings():
    assert is_menu_command("menu")
    assert is_menu_command("Menú")
    assert not is_menu_command("menus")


def test_new_user_greeting_gets_main_menu_and_idle(aranceles, nav, outbox, store):
    nav.on_greeting(USER)
    assert store.get(USER) == IDLE
    assert len(outbox.sent) == 1
    assert "① Aranceles" in outbox.texts()[0]


def test_unseen_user_defaults_to_idle(store):
    assert isinstance(store.get("nobody"), Idle)


def test_scenario_a_full_walk(aranceles, nav, outbox, store):
    nav.on_message(USER, "hola")
    menu_lines = [ln for ln in outbox.texts()[0].splitlines() if ln.startswith("①")]
    assert menu_lines == ["① Aranceles"]

    outbox.clear()
    nav.on_message(USER, "1")
    assert store.get(USER) == InCategory(1, "Aranceles", None)
    listing = outbox.texts()
    assert len(listing) == 1
    assert "① ¿Cuándo se paga?" in listing[0]
    assert "② ¿Dónde se paga?" in listing[0]

    outbox.clear()
    nav.on_message(USER, "2")
    assert store.get(USER) == InCategory(1, "Aranceles", 1)
    assert outbox.texts() == ["*¿Dónde se paga?*\n\n✅ En tesorería.", ui.NAV_HINT_TEXT]


def test_scenario_b_invalid_category_number(aranceles, nav, outbox, store):
    nav.on_message(USER, "9")
    assert outbox.texts() == [ui.INVALID_NUMBER_TEXT]
    assert store.get(USER) == IDLE


def test_scenario_c_category_with_only_inactive_questions(db, nav, outbox, store, monkeypatch):
    db.add_category(1, "Aranceles")
    db.add_question(11, 1, "q", "a")
    # The admin switches the last question off between menu and selection.
    monkeypatch.setattr(navigation, "list_active_questions_by_category", lambda cid: [])
    nav.on_message(USER, "1")
    assert outbox.texts() == [ui.NO_QUESTIONS_TEXT]
    assert store.get(USER) == IDLE


def test_scenario_d_menu_rebuilds_from_fresh_data(aranceles, nav, outbox, store):
    nav.on_message(USER, "1")
    nav.on_message(USER, "1")
    aranceles.add_category(2, "Becas")
    aranceles.add_question(21, 2, "¿Hay becas?", "Sí.")
    outbox.clear()

    nav.on_message(USER, "menu")
    assert store.get(USER) == IDLE
    assert len(outbox.sent) == 1
    assert "① Aranceles" in outbox.texts()[0]
    assert "② Becas" in outbox.texts()[0]


@pytest.mark.parametrize("digit,glyph", [("1", "①"), ("2", "②")])
def test_glyph_and_digit_selection_are_identical(aranceles, digit, glyph):
    results = []
    for text in (digit, glyph):
        store = InMemoryConversationStore()
        sent = []
        nav = Navigator(store=store, send=lambda to, t: sent.append(t))
        nav.on_message(USER, "1")
        nav.on_message(USER, text)
        results.append((store.get(USER), sent))
    assert results[0] == results[1]


@pytest.mark.parametrize("text", ["0", "2", "99", "⑩"])
def test_invalid_category_never_changes_state(aranceles, outbox, text):
    store = CountingStore()
    nav = Navigator(store=store, send=outbox)
    for _ in range(3):
        nav.on_message(USER, text)
    assert store.writes == 0
    assert store.get(USER) == IDLE
    assert outbox.texts() == [ui.INVALID_NUMBER_TEXT] * 3


@pytest.mark.parametrize("text", ["0", "3", "⑤"])
def test_invalid_question_keeps_category_state(aranceles, outbox, text):
    store = CountingStore()
    nav = Navigator(store=store, send=outbox)
    nav.on_message(USER, "1")
    nav.on_message(USER, "1")
    before, writes = store.get(USER), store.writes
    outbox.clear()
    nav.on_message(USER, text)
    nav.on_message(USER, text)
    assert store.get(USER) == before == InCategory(1, "Aranceles", 0)
    assert store.writes == writes
    assert outbox.texts() == [ui.QUESTION_NOT_FOUND_TEXT] * 2


def test_round_trip_back_to_new_user_state(aranceles, nav, store):
    nav.on_message(USER, "1")
    nav.on_message(USER, "2")
    nav.on_message(USER, "Menú")
    assert store.get(USER) == store.get("brand-new-user") == IDLE


def test_each_transition_writes_once(aranceles, outbox):
    store = CountingStore()
    nav = Navigator(store=store, send=outbox)
    nav.on_greeting(USER)
    assert store.writes == 1
    nav.on_message(USER, "1")
    assert store.writes == 2
    nav.on_message(USER, "1")
    assert store.writes == 3
    nav.on_message(USER, "menu")
    assert store.writes == 4


def test_unrecognised_text_keeps_state(aranceles, nav, outbox, store):
    nav.on_message(USER, "1")
    before = store.get(USER)
    outbox.clear()
    nav.on_message(USER, "qué es esto")
    assert outbox.texts() == [ui.FALLBACK_TEXT]
    assert store.get(USER) == before


def test_greeting_resets_from_inside_category(aranceles, nav, store):
    nav.on_message(USER, "1")
    nav.on_message(USER, "HOLA")
    assert store.get(USER) == IDLE


def test_menu_failure_while_idle_sends_error_text(aranceles, nav, outbox, store):
    aranceles.down = True
    nav.on_message(USER, "1")
    assert outbox.texts() == [ui.MENU_ERROR_TEXT]
    assert store.get(USER) == IDLE


def test_question_load_failure_keeps_state(aranceles, nav, outbox, store):
    nav.on_message(USER, "1")
    before = store.get(USER)
    aranceles.down = True
    outbox.clear()
    nav.on_message(USER, "1")
    assert outbox.texts() == [ui.QUESTIONS_ERROR_TEXT]
    assert store.get(USER) == before


def test_users_do_not_share_state(aranceles, nav, store):
    nav.on_message("a", "1")
    nav.on_message("b", "9")
    assert isinstance(store.get("a"), InCategory)
    assert store.get("b") == IDLE


def test_same_user_messages_are_serialized(aranceles, outbox, monkeypatch):
    store = InMemoryConversationStore()
    nav = Navigator(store=store, send=outbox)
    active = []
    overlaps = []

    def slow_questions(cid):
        active.append(1)
        if len(active) > 1:
            overlaps.append(True)
        time.sleep(0.05)
        active.pop()
        return aranceles.active_questions(cid)

    monkeypatch.setattr(navigation, "list_active_questions_by_category", slow_questions)
    threads = [threading.Thread(target=nav.on_message, args=(USER, "1")) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert overlaps == []
    # First tap opens the category, the next two answer question 1.
    assert store.get(USER) == InCategory(1, "Aranceles", 0)


@pytest.mark.parametrize("text", ["9" * 5000, "1" + "0" * 50])
def test_huge_number_is_just_an_invalid_pick(aranceles, outbox, text):
    store = CountingStore()
    nav = Navigator(store=store, send=outbox)
    nav.on_message(USER, text)
    assert outbox.texts() == [ui.INVALID_NUMBER_TEXT]
    assert store.writes == 0
    assert store.get(USER) == IDLE
