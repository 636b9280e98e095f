from __future__ import annotations
import logging
from dataclasses import dataclass, field
from logic.models import Category
from services.supabase import (
    SupabaseError,
    list_distinct_active_category_ids,
    list_categories_by_ids,
)
from ui import main_menu_text, no_categories_text, MENU_ERROR_TEXT

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Menu:
    text: str
    categories: list[Category] = field(default_factory=list)
    failed: bool = False


def build_menu() -> Menu:
    """Main menu built from the categories that still have an active question.

    ``categories[i]`` is the entry shown at position ``i + 1`` in ``text``.
    Never raises: a data store failure turns into the error menu.
    """
    try:
        ids = list_distinct_active_category_ids()
        if not ids:
            return Menu(no_categories_text())
        categories = list_categories_by_ids(ids)
    except SupabaseError as e:
        log.exception("Building main menu failed: %s", e)
        return Menu(MENU_ERROR_TEXT, failed=True)

    # A category can vanish between the two reads; same as having none left.
    if not categories:
        return Menu(no_categories_text())
    return Menu(main_menu_text(categories), categories)
