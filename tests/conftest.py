import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest

from logic import menu, navigation
from logic.models import Category, Question
from logic.navigation import Navigator
from logic.state import InMemoryConversationStore
from services.supabase import SupabaseError


class FakeDB:
    """Stands in for the three Supabase reads the navigator makes."""

    def __init__(self):
        self.categories: list[Category] = []
        self.questions: list[Question] = []
        self.down = False

    def add_category(self, cid, name):
        self.categories.append(Category(cid, name))

    def add_question(self, qid, cid, question, answer, active=True):
        self.questions.append(Question(qid, cid, question, answer, active))

    def _check(self):
        if self.down:
            raise SupabaseError("store unreachable")

    def distinct_active_category_ids(self):
        self._check()
        return {q.category_id for q in self.questions if q.is_active}

    def categories_by_ids(self, ids):
        self._check()
        return sorted((c for c in self.categories if c.id in set(ids)), key=lambda c: c.id)

    def active_questions(self, category_id):
        self._check()
        return sorted(
            (q for q in self.questions if q.category_id == category_id and q.is_active),
            key=lambda q: q.id,
        )


class Outbox:
    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def __call__(self, to, text):
        self.sent.append((to, text))
        return True

    def texts(self, to=None):
        return [t for u, t in self.sent if to is None or u == to]

    def clear(self):
        self.sent.clear()


@pytest.fixture
def db(monkeypatch):
    fake = FakeDB()
    monkeypatch.setattr(menu, "list_distinct_active_category_ids", fake.distinct_active_category_ids)
    monkeypatch.setattr(menu, "list_categories_by_ids", fake.categories_by_ids)
    monkeypatch.setattr(navigation, "list_active_questions_by_category", fake.active_questions)
    return fake


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def nav(db, outbox, store):
    return Navigator(store=store, send=outbox)
