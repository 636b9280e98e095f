from __future__ import annotations
import logging
from datetime import datetime, timezone
import requests
from requests.adapters import HTTPAdapter
from config import (
    SUPABASE_URL,
    SUPABASE_SERVICE_ROLE_KEY,
    HTTP_TIMEOUT,
    CATEGORY_TABLE,
    QUESTION_TABLE,
    USER_TABLE,
    MODALITY_TABLE,
    TUTORIAL_TABLE,
    RATING_TABLE,
)
from logic.models import Category, Question

log = logging.getLogger(__name__)


class SupabaseError(RuntimeError):
    """Any failure talking to the data store: transport, HTTP status or body."""


# One session for every PostgREST call; it carries the service-role key.
_session = requests.Session()
_session.headers.update({
    "apikey": SUPABASE_SERVICE_ROLE_KEY,
    "Authorization": f"Bearer {SUPABASE_SERVICE_ROLE_KEY}",
    "Content-Type": "application/json",
})
_session.mount("https://", HTTPAdapter(pool_connections=20, pool_maxsize=20))


def _url(table: str) -> str:
    return f"{SUPABASE_URL}/rest/v1/{table}"


def _request(method: str, table: str, params=None, payload=None, returning: bool = False):
    headers = {"Prefer": "return=representation"} if returning else None
    try:
        r = _session.request(
            method,
            _url(table),
            params=params,
            json=payload,
            headers=headers,
            timeout=HTTP_TIMEOUT,
        )
    except requests.RequestException as e:
        raise SupabaseError(f"{method} {table} failed: {e}") from e
    if not r.ok:
        log.error("❌ Supabase %s %s -> %s %s", method, table, r.status_code, r.text[:800])
        raise SupabaseError(f"{method} {table} -> {r.status_code}")
    if not r.content:
        return []
    try:
        return r.json()
    except ValueError as e:
        raise SupabaseError(f"{method} {table} returned a non-JSON body") from e


def sb_select(table: str, filters: dict | None = None, columns: str = "*", order: str | None = None):
    params = {"select": columns}
    params.update(filters or {})
    if order:
        params["order"] = order
    return _request("GET", table, params=params)


def sb_insert(table: str, row: dict):
    return _request("POST", table, payload=[row], returning=True)


def sb_update(table: str, filters: dict, changes: dict):
    return _request("PATCH", table, params=filters, payload=changes, returning=True)


def sb_delete(table: str, filters: dict):
    return _request("DELETE", table, params=filters, returning=True)


def eq(value) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"eq.{value}"


def _in_item(value) -> str:
    # Strings get quoted so commas or parens inside a value can't split the list.
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return str(value)


def in_(values) -> str:
    return "in.(" + ",".join(_in_item(v) for v in values) + ")"


# Reads the navigation engine depends on

def list_distinct_active_category_ids() -> set[int]:
    rows = sb_select(QUESTION_TABLE, {"is_active": eq(True)}, columns="category_id")
    return {row["category_id"] for row in rows if row.get("category_id") is not None}


def list_categories_by_ids(ids) -> list[Category]:
    ids = sorted(ids)
    if not ids:
        return []
    rows = sb_select(CATEGORY_TABLE, {"id": in_(ids)}, columns="id,name_category", order="id.asc")
    return [Category.from_row(row) for row in rows]


def list_active_questions_by_category(category_id: int) -> list[Question]:
    rows = sb_select(
        QUESTION_TABLE,
        {"category_id": eq(category_id), "is_active": eq(True)},
        columns="id,category_id,question,answer,is_active",
        order="id.asc",
    )
    return [Question.from_row(row) for row in rows]


# Keyed CRUD shared by the dashboard endpoints (rows stay as dicts; the
# dashboard consumes them verbatim).

def _first(rows):
    return rows[0] if rows else None


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def list_rows(table: str, order: str = "id.asc") -> list[dict]:
    return sb_select(table, order=order)


def get_row(table: str, key: str, value) -> dict | None:
    return _first(sb_select(table, {key: eq(value)}))


def insert_row(table: str, row: dict) -> dict | None:
    return _first(sb_insert(table, row))


def update_row(table: str, key: str, value, changes: dict) -> dict | None:
    return _first(sb_update(table, {key: eq(value)}, changes))


def delete_row(table: str, key: str, value) -> dict | None:
    return _first(sb_delete(table, {key: eq(value)}))


# Categories and questions

def list_categories() -> list[dict]:
    return list_rows(CATEGORY_TABLE)


def get_category(category_id: int) -> dict | None:
    return get_row(CATEGORY_TABLE, "id", category_id)


def create_category(name: str) -> dict | None:
    return insert_row(CATEGORY_TABLE, {"name_category": name})


def update_category(category_id: int, name: str) -> dict | None:
    return update_row(CATEGORY_TABLE, "id", category_id, {"name_category": name})


def delete_category(category_id: int) -> dict | None:
    return delete_row(CATEGORY_TABLE, "id", category_id)


def list_questions(active_only: bool = False) -> list[dict]:
    filters = {"is_active": eq(True)} if active_only else None
    return sb_select(QUESTION_TABLE, filters, order="id.asc")


def get_question(question_id: int) -> dict | None:
    return get_row(QUESTION_TABLE, "id", question_id)


def create_question(category_id: int, question: str, answer: str) -> dict | None:
    row = {"category_id": category_id, "question": question, "answer": answer, "is_active": True}
    return insert_row(QUESTION_TABLE, row)


def update_question(question_id: int, changes: dict) -> dict | None:
    return update_row(QUESTION_TABLE, "id", question_id, changes)


def toggle_question(question_id: int) -> dict | None:
    current = get_question(question_id)
    if current is None:
        return None
    return update_question(question_id, {"is_active": not current.get("is_active")})


def delete_question(question_id: int) -> dict | None:
    return delete_row(QUESTION_TABLE, "id", question_id)


# Users are keyed by rut, modalities by id_modality.

def list_users() -> list[dict]:
    return list_rows(USER_TABLE, order="rut.asc")


def get_user(rut: str) -> dict | None:
    return get_row(USER_TABLE, "rut", rut)


def create_user(fields: dict) -> dict | None:
    return insert_row(USER_TABLE, {**fields, "created_at": _now_iso()})


def update_user(rut: str, changes: dict) -> dict | None:
    return update_row(USER_TABLE, "rut", rut, changes)


def delete_user(rut: str) -> dict | None:
    return delete_row(USER_TABLE, "rut", rut)


def users_by_ruts(ruts) -> dict:
    ruts = sorted({r for r in ruts if r})
    if not ruts:
        return {}
    rows = sb_select(
        USER_TABLE,
        {"rut": in_(ruts)},
        columns="rut,first_name,last_name,institutional_email,modality_id",
    )
    return {row["rut"]: row for row in rows}


def list_modalities() -> list[dict]:
    return list_rows(MODALITY_TABLE, order="id_modality.asc")


def get_modality(modality_id: int) -> dict | None:
    return get_row(MODALITY_TABLE, "id_modality", modality_id)


def create_modality(kind: str) -> dict | None:
    return insert_row(MODALITY_TABLE, {"type": kind})


def update_modality(modality_id: int, kind: str) -> dict | None:
    return update_row(MODALITY_TABLE, "id_modality", modality_id, {"type": kind})


def delete_modality(modality_id: int) -> dict | None:
    return delete_row(MODALITY_TABLE, "id_modality", modality_id)


def modalities_by_ids(ids) -> dict:
    ids = sorted({i for i in ids if i is not None})
    if not ids:
        return {}
    rows = sb_select(MODALITY_TABLE, {"id_modality": in_(ids)}, columns="id_modality,type")
    return {row["id_modality"]: row for row in rows}


# Tutorial status: one row per student who went through the onboarding tutorial.

def list_tutorial_statuses() -> list[dict]:
    return list_rows(TUTORIAL_TABLE)


def get_tutorial_status(status_id: int) -> dict | None:
    return get_row(TUTORIAL_TABLE, "id", status_id)


def get_tutorial_status_for(rut: str) -> dict | None:
    return get_row(TUTORIAL_TABLE, "rut", rut)


def create_tutorial_status(rut: str, seen: bool) -> dict | None:
    return insert_row(TUTORIAL_TABLE, {"rut": rut, "seen": seen, "date": _now_iso()})


def update_tutorial_status(status_id: int, changes: dict) -> dict | None:
    return update_row(TUTORIAL_TABLE, "id", status_id, changes)


def delete_tutorial_status(status_id: int) -> dict | None:
    return delete_row(TUTORIAL_TABLE, "id", status_id)


def tutorial_dates_between(start: datetime, end: datetime) -> list[str]:
    # Same column filtered twice, so params go as pairs instead of a dict.
    params = [
        ("select", "id,date"),
        ("date", f"gte.{start.isoformat()}"),
        ("date", f"lte.{end.isoformat()}"),
        ("order", "date.asc"),
    ]
    rows = _request("GET", TUTORIAL_TABLE, params=params)
    return [row["date"] for row in rows if row.get("date")]


# Ratings left by students at the end of a chat.

def list_ratings() -> list[dict]:
    return sb_select(RATING_TABLE, columns="id,score,comment,date,rut", order="date.desc")


def create_rating(rut: str, score, comment=None) -> dict | None:
    return insert_row(RATING_TABLE, {"rut": rut, "score": score, "comment": comment, "date": _now_iso()})


def update_rating(rating_id: int, changes: dict) -> dict | None:
    return update_row(RATING_TABLE, "id", rating_id, changes)


def delete_rating(rating_id: int) -> dict | None:
    return delete_row(RATING_TABLE, "id", rating_id)
