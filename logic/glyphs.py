"""Position markers shared by every numbered list the bot sends.

Positions 1..10 render as circled digits; anything past ten falls back to
``"<n>."``. Users may answer with either the glyph or the plain number.
"""

from __future__ import annotations
import re

GLYPHS = ("①", "②", "③", "④", "⑤", "⑥", "⑦", "⑧", "⑨", "⑩")

_DIGITS = re.compile(r"^[0-9]+$")

# Longer digit strings can never be a list position; they map past any list
# instead of being parsed.
MAX_DIGITS = 6
BEYOND_ANY_LIST = 10 ** MAX_DIGITS


def glyph_for(position: int) -> str | None:
    if 1 <= position <= len(GLYPHS):
        return GLYPHS[position - 1]
    return None


def marker_for(position: int) -> str:
    return glyph_for(position) or f"{position}."


def position_for(text: str | None) -> int | None:
    """1-based position typed by the user, or None if the text isn't one."""
    t = (text or "").strip()
    if t in GLYPHS:
        return GLYPHS.index(t) + 1
    if _DIGITS.match(t):
        digits = t.lstrip("0") or "0"
        if len(digits) > MAX_DIGITS:
            return BEYOND_ANY_LIST
        return int(digits, 10)
    return None


def numbered_lines(labels) -> list[str]:
    return [f"{marker_for(i)} {label}" for i, label in enumerate(labels, 1)]
