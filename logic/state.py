"""Per-user conversation cursor and where it lives.

A user is either ``Idle`` (looking at the main menu) or ``InCategory``
(looking at one category's questions, possibly having opened one of them).
"""

from __future__ import annotations
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class InCategory:
    category_id: int
    category_name: str
    last_index: int | None = None  # 0-based offset of the last answered question


ConversationState = Union[Idle, InCategory]

IDLE = Idle()


def state_to_dict(state: ConversationState) -> dict:
    if isinstance(state, InCategory):
        return {
            "state": "in_category",
            "category_id": state.category_id,
            "category_name": state.category_name,
            "last_index": state.last_index,
        }
    return {"state": "idle"}


class ConversationStore:
    """Key/value home for conversation states, keyed by WhatsApp sender id."""

    def get(self, user_id: str) -> ConversationState:
        raise NotImplementedError

    def set(self, user_id: str, state: ConversationState) -> None:
        raise NotImplementedError

    def delete(self, user_id: str) -> None:
        raise NotImplementedError


class InMemoryConversationStore(ConversationStore):
    """Process-local store. Unbounded, never evicted, empty after a restart."""

    def __init__(self):
        self._states: dict[str, ConversationState] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> ConversationState:
        with self._lock:
            return self._states.get(user_id, IDLE)

    def set(self, user_id: str, state: ConversationState) -> None:
        with self._lock:
            self._states[user_id] = state

    def delete(self, user_id: str) -> None:
        with self._lock:
            self._states.pop(user_id, None)

    def __len__(self):
        with self._lock:
            return len(self._states)


class UserLocks:
    """One lock per user id so a double-tap can't interleave two transitions."""

    def __init__(self):
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, user_id: str):
        lock = self._lock_for(user_id)
        with lock:
            yield
