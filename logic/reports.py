"""Dashboard read models built on top of the raw tables.

Two things live here: ratings joined to the student who left them (and that
student's modality), and the per-day count of students who finished the
onboarding tutorial. Days are UTC calendar days.
"""

from __future__ import annotations
import logging
from collections import Counter
from datetime import date, datetime, time, timedelta, timezone
from config import REPORT_DEFAULT_DAYS, REPORT_MAX_DAYS
from services import supabase
from services.supabase import SupabaseError

log = logging.getLogger(__name__)

NO_NAME = "Estudiante sin nombre"
NO_EMAIL = "Sin correo"
NO_RUT = "Sin RUT"
NO_MODALITY = "Sin modalidad"


class ReportRangeError(ValueError):
    """Query parameters that don't describe a usable day range."""


def rating_view(rating: dict, user: dict | None, modality: dict | None) -> dict:
    user = user or {}
    name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
    return {
        "id": rating.get("id"),
        "score": rating.get("score"),
        "comment": rating.get("comment"),
        "date": rating.get("date"),
        "rut": rating.get("rut"),
        "nombre": name or NO_NAME,
        "correo": user.get("institutional_email") or NO_EMAIL,
        "rut_usuario": user.get("rut") or NO_RUT,
        "modalidad": (modality or {}).get("type") or NO_MODALITY,
    }


def enrich_ratings(ratings: list[dict], users_by_rut: dict, modalities_by_id: dict) -> list[dict]:
    views = []
    for r in ratings:
        user = users_by_rut.get(r.get("rut"))
        modality = modalities_by_id.get(user.get("modality_id")) if user else None
        views.append(rating_view(r, user, modality))
    return views


def rating_views() -> list[dict]:
    """Newest ratings first, each with the student's name, email and modality.

    The ratings themselves must load. If the people behind them don't, the
    ratings still go out with placeholder details.
    """
    ratings = supabase.list_ratings()
    users, modalities = {}, {}
    try:
        users = supabase.users_by_ruts(r.get("rut") for r in ratings)
        modalities = supabase.modalities_by_ids(u.get("modality_id") for u in users.values())
    except SupabaseError as e:
        log.warning("⚠️ Couldn't load rating authors, sending placeholders: %s", e)
    return enrich_ratings(ratings, users, modalities)


def report_window(days: int | None = None, start: str | None = None, end: str | None = None,
                  now: datetime | None = None) -> tuple[date, date]:
    """First and last day (inclusive) for the daily report.

    ``start``/``end`` are YYYY-MM-DD and win over ``days``. A missing end means
    today; a missing start means REPORT_DEFAULT_DAYS back. Without either,
    it's the last ``days`` days counting today, with REPORT_DEFAULT_DAYS when
    ``days`` is missing or not positive.
    """
    today = (now or datetime.now(timezone.utc)).date()
    if start or end:
        try:
            last = date.fromisoformat(end) if end else today
            first = date.fromisoformat(start) if start else today - timedelta(days=REPORT_DEFAULT_DAYS)
        except ValueError as e:
            raise ReportRangeError(f"Fecha inválida: {e}") from e
    else:
        lookback = days if days and days > 0 else REPORT_DEFAULT_DAYS
        if lookback > REPORT_MAX_DAYS:
            raise ReportRangeError(f"Máximo {REPORT_MAX_DAYS} días")
        last = today
        first = today - timedelta(days=lookback - 1)

    if (last - first).days + 1 > REPORT_MAX_DAYS:
        raise ReportRangeError(f"Máximo {REPORT_MAX_DAYS} días")
    return first, last


def daily_counts(stamps, first: date, last: date) -> list[dict]:
    # Every day in the range shows up, zero or not.
    counts = Counter(str(s)[:10] for s in stamps)
    out = []
    day = first
    while day <= last:
        key = day.isoformat()
        out.append({"date": key, "count": counts.get(key, 0)})
        day += timedelta(days=1)
    return out


def users_per_day(days: int | None = None, start: str | None = None, end: str | None = None,
                  now: datetime | None = None) -> list[dict]:
    first, last = report_window(days, start, end, now)
    if first > last:
        return []
    stamps = supabase.tutorial_dates_between(
        datetime.combine(first, time.min, tzinfo=timezone.utc),
        datetime.combine(last, time.max, tzinfo=timezone.utc),
    )
    return daily_counts(stamps, first, last)
