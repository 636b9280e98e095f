"""Conversation engine: turns one inbound text into replies plus a new state.

Two states per user: ``Idle`` (numbers pick a category from the main menu)
and ``InCategory`` (numbers pick a question from that category). Greetings
and "menu" always go back to ``Idle``. Anything unrecognised gets a hint and
leaves the state alone.

Positions the user types are 1-based; they are turned into 0-based offsets
before touching any fetched list, and anything out of range gets an explicit
"invalid" reply instead of a state change.
"""

from __future__ import annotations
import logging
from config import GREETING_KEYWORDS, BRAND_KEYWORD, MENU_COMMANDS
from logic.glyphs import position_for
from logic.menu import build_menu
from logic.state import (
    ConversationStore,
    InMemoryConversationStore,
    UserLocks,
    InCategory,
    IDLE,
)
from services.supabase import SupabaseError, list_active_questions_by_category
from services.whatsapp import send_message
import ui

log = logging.getLogger(__name__)


def is_greeting(text: str | None) -> bool:
    t = (text or "").strip().lower()
    if not t:
        return False
    return t in GREETING_KEYWORDS or (bool(BRAND_KEYWORD) and BRAND_KEYWORD in t)


def is_menu_command(text: str | None) -> bool:
    return (text or "").strip().lower() in MENU_COMMANDS


def _pick(items: list, position: int):
    # 1-based position in, item or None out.
    if 1 <= position <= len(items):
        return items[position - 1]
    return None


class Navigator:
    def __init__(self, store: ConversationStore | None = None, locks: UserLocks | None = None, send=None):
        self.store = store if store is not None else InMemoryConversationStore()
        self.locks = locks if locks is not None else UserLocks()
        self.send = send or send_message

    def on_greeting(self, user_id: str) -> None:
        with self.locks.hold(user_id):
            self._reset(user_id)

    def on_message(self, user_id: str, text: str) -> None:
        with self.locks.hold(user_id):
            self._step(user_id, text)

    def _step(self, user_id: str, text: str) -> None:
        if is_greeting(text) or is_menu_command(text):
            self._reset(user_id)
            return

        state = self.store.get(user_id)
        position = position_for(text)
        if position is not None:
            if isinstance(state, InCategory):
                self._answer_question(user_id, state, position)
            else:
                self._open_category(user_id, position)
            return

        log.info("Unrecognised text from %s: %r", user_id, text)
        self.send(user_id, ui.FALLBACK_TEXT)

    def _reset(self, user_id: str) -> None:
        self.store.set(user_id, IDLE)
        self.send(user_id, build_menu().text)

    def _open_category(self, user_id: str, position: int) -> None:
        menu = build_menu()
        if menu.failed:
            self.send(user_id, menu.text)
            return
        category = _pick(menu.categories, position)
        if category is None:
            self.send(user_id, ui.INVALID_NUMBER_TEXT)
            return

        questions = self._questions(category.id)
        if questions is None:
            self.send(user_id, ui.QUESTIONS_ERROR_TEXT)
            return
        if not questions:
            self.send(user_id, ui.NO_QUESTIONS_TEXT)
            return

        self.store.set(user_id, InCategory(category.id, category.name))
        log.info("%s opened category %s (%s)", user_id, category.id, category.name)
        self.send(user_id, ui.category_questions_text(category, questions))

    def _answer_question(self, user_id: str, state: InCategory, position: int) -> None:
        questions = self._questions(state.category_id)
        if questions is None:
            self.send(user_id, ui.QUESTIONS_ERROR_TEXT)
            return
        question = _pick(questions, position)
        if question is None:
            self.send(user_id, ui.QUESTION_NOT_FOUND_TEXT)
            return

        self.store.set(user_id, InCategory(state.category_id, state.category_name, position - 1))
        self.send(user_id, ui.answer_text(question))
        self.send(user_id, ui.NAV_HINT_TEXT)

    def _questions(self, category_id: int):
        # None means the store was unreachable; [] means nothing active.
        try:
            return list_active_questions_by_category(category_id)
        except SupabaseError as e:
            log.exception("Loading questions for category %s failed: %s", category_id, e)
            return None
