from __future__ import annotations
import logging
from flask import Blueprint, request, jsonify
from services import supabase
from services.supabase import SupabaseError
from logic import reports
from logic.reports import ReportRangeError

log = logging.getLogger(__name__)
bp = Blueprint("admin", __name__, url_prefix="/api")

# Dashboard contract: list endpoints return a bare array (empty on failure),
# single-item endpoints return the row itself.


def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _row_or_404(row, missing: str):
    if row is None:
        return jsonify({"error": missing}), 404
    return jsonify(row), 200


def _blank(value) -> bool:
    # 0 and False are real values; only absent or empty fields count as missing.
    return value is None or (isinstance(value, str) and not value.strip())


def _changes(data: dict, fields) -> dict:
    # Only fields the caller actually sent; absent ones are left alone.
    return {k: data[k] for k in fields if k in data}


# Categories

@bp.get("/categories")
def list_categories():
    try:
        return jsonify(supabase.list_categories() or []), 200
    except SupabaseError as e:
        log.exception("Listing categories failed: %s", e)
        return jsonify([]), 500


@bp.get("/categories/<int:category_id>")
def get_category(category_id: int):
    try:
        return _row_or_404(supabase.get_category(category_id), "Categoría no encontrada")
    except SupabaseError as e:
        log.exception("Fetching category %s failed: %s", category_id, e)
        return jsonify({"error": "Error al obtener la categoría"}), 500


@bp.post("/categories")
def create_category():
    name = (_body().get("name_category") or "").strip()
    if not name:
        return jsonify({"error": "El campo name_category es requerido"}), 400
    try:
        created = supabase.create_category(name)
        log.info("✅ Category created: %s", created)
        return jsonify(created), 201
    except SupabaseError as e:
        log.exception("Creating category failed: %s", e)
        return jsonify({"error": "Error al crear la categoría", "details": str(e)}), 500


@bp.put("/categories/<int:category_id>")
def update_category(category_id: int):
    name = (_body().get("name_category") or "").strip()
    if not name:
        return jsonify({"error": "El campo name_category es requerido"}), 400
    try:
        return _row_or_404(supabase.update_category(category_id, name), "Categoría no encontrada")
    except SupabaseError as e:
        log.exception("Updating category %s failed: %s", category_id, e)
        return jsonify({"error": "Error al actualizar la categoría"}), 500


@bp.delete("/categories/<int:category_id>")
def delete_category(category_id: int):
    try:
        deleted = supabase.delete_category(category_id)
    except SupabaseError as e:
        log.exception("Deleting category %s failed: %s", category_id, e)
        return jsonify({"error": "Error al eliminar la categoría"}), 500
    if deleted is None:
        return jsonify({"error": "Categoría no encontrada"}), 404
    return jsonify({"message": "Categoría eliminada", "deleted": deleted}), 200


# Questions

@bp.get("/questions")
def list_questions():
    try:
        return jsonify(supabase.list_questions() or []), 200
    except SupabaseError as e:
        log.exception("Listing questions failed: %s", e)
        return jsonify([]), 500


@bp.get("/questions/active")
def list_active_questions():
    try:
        return jsonify(supabase.list_questions(active_only=True) or []), 200
    except SupabaseError as e:
        log.exception("Listing active questions failed: %s", e)
        return jsonify([]), 500


@bp.get("/questions/<int:question_id>")
def get_question(question_id: int):
    try:
        return _row_or_404(supabase.get_question(question_id), "Pregunta no encontrada")
    except SupabaseError as e:
        log.exception("Fetching question %s failed: %s", question_id, e)
        return jsonify({"error": "Error al obtener la pregunta"}), 500


@bp.post("/questions")
def create_question():
    data = _body()
    category_id, question, answer = data.get("category_id"), data.get("question"), data.get("answer")
    if _blank(category_id) or _blank(question) or _blank(answer):
        return jsonify({"error": "Todos los campos (category_id, question, answer) son requeridos"}), 400
    try:
        created = supabase.create_question(category_id, question, answer)
        log.info("✅ Question created: %s", created)
        return jsonify(created), 201
    except SupabaseError as e:
        log.exception("Creating question failed: %s", e)
        return jsonify({"error": "Error al crear la pregunta", "details": str(e)}), 500


@bp.put("/questions/<int:question_id>")
def update_question(question_id: int):
    data = _body()
    changes = _changes(data, ("category_id", "question", "answer", "is_active"))
    if not changes:
        return jsonify({"error": "No hay cambios que aplicar"}), 400
    if "is_active" in changes and not isinstance(changes["is_active"], bool):
        return jsonify({"error": "El campo is_active debe ser true o false"}), 400
    try:
        return _row_or_404(supabase.update_question(question_id, changes), "Pregunta no encontrada")
    except SupabaseError as e:
        log.exception("Updating question %s failed: %s", question_id, e)
        return jsonify({"error": "Error al actualizar la pregunta"}), 500


@bp.put("/questions/<int:question_id>/toggle")
def toggle_question(question_id: int):
    try:
        return _row_or_404(supabase.toggle_question(question_id), "Pregunta no encontrada")
    except SupabaseError as e:
        log.exception("Toggling question %s failed: %s", question_id, e)
        return jsonify({"error": "Error al cambiar estado de la pregunta"}), 500


@bp.delete("/questions/<int:question_id>")
def delete_question(question_id: int):
    try:
        deleted = supabase.delete_question(question_id)
    except SupabaseError as e:
        log.exception("Deleting question %s failed: %s", question_id, e)
        return jsonify({"error": "Error al eliminar la pregunta"}), 500
    if deleted is None:
        return jsonify({"error": "Pregunta no encontrada"}), 404
    return jsonify({"message": "Pregunta eliminada", "deleted": deleted}), 200


# Users (keyed by rut)

USER_FIELDS = ("rut", "institutional_email", "gender", "first_name", "last_name", "phone", "modality_id")
USER_REQUIRED = ("rut", "institutional_email", "first_name", "last_name", "modality_id")


@bp.get("/users")
def list_users():
    try:
        return jsonify(supabase.list_users() or []), 200
    except SupabaseError as e:
        log.exception("Listing users failed: %s", e)
        return jsonify([]), 500


@bp.get("/users/<rut>")
def get_user(rut: str):
    try:
        return _row_or_404(supabase.get_user(rut), "Usuario no encontrado")
    except SupabaseError as e:
        log.exception("Fetching user %s failed: %s", rut, e)
        return jsonify({"error": "Error al obtener el usuario"}), 500


@bp.post("/users")
def create_user():
    data = _body()
    if any(_blank(data.get(k)) for k in USER_REQUIRED):
        log.info("❌ Missing user fields: %s", data)
        return jsonify({"error": "Los campos rut, institutional_email, first_name, last_name y modality_id son requeridos"}), 400
    try:
        created = supabase.create_user(_changes(data, USER_FIELDS))
        log.info("✅ User created: %s", created)
        return jsonify(created), 201
    except SupabaseError as e:
        log.exception("Creating user failed: %s", e)
        return jsonify({"error": "Error al crear el usuario", "details": str(e)}), 500


@bp.put("/users/<rut>")
def update_user(rut: str):
    changes = _changes(_body(), USER_FIELDS)
    if not changes:
        return jsonify({"error": "No hay cambios que aplicar"}), 400
    try:
        return _row_or_404(supabase.update_user(rut, changes), "Usuario no encontrado")
    except SupabaseError as e:
        log.exception("Updating user %s failed: %s", rut, e)
        return jsonify({"error": "Error al actualizar el usuario"}), 500


@bp.delete("/users/<rut>")
def delete_user(rut: str):
    try:
        deleted = supabase.delete_user(rut)
    except SupabaseError as e:
        log.exception("Deleting user %s failed: %s", rut, e)
        return jsonify({"error": "Error al eliminar el usuario"}), 500
    if deleted is None:
        return jsonify({"error": "Usuario no encontrado"}), 404
    return jsonify({"message": "Usuario eliminado", "deleted": deleted}), 200


# Modalities

@bp.get("/modalities")
def list_modalities():
    try:
        return jsonify(supabase.list_modalities() or []), 200
    except SupabaseError as e:
        log.exception("Listing modalities failed: %s", e)
        return jsonify([]), 500


@bp.get("/modalities/<int:modality_id>")
def get_modality(modality_id: int):
    try:
        return _row_or_404(supabase.get_modality(modality_id), "Modalidad no encontrada")
    except SupabaseError as e:
        log.exception("Fetching modality %s failed: %s", modality_id, e)
        return jsonify({"error": "Error al obtener la modalidad"}), 500


@bp.post("/modalities")
def create_modality():
    kind = _body().get("type")
    if _blank(kind):
        return jsonify({"error": "El campo type es requerido"}), 400
    try:
        created = supabase.create_modality(kind)
        log.info("✅ Modality created: %s", created)
        return jsonify(created), 201
    except SupabaseError as e:
        log.exception("Creating modality failed: %s", e)
        return jsonify({"error": "Error al crear la modalidad", "details": str(e)}), 500


@bp.put("/modalities/<int:modality_id>")
def update_modality(modality_id: int):
    kind = _body().get("type")
    if _blank(kind):
        return jsonify({"error": "El campo type es requerido"}), 400
    try:
        return _row_or_404(supabase.update_modality(modality_id, kind), "Modalidad no encontrada")
    except SupabaseError as e:
        log.exception("Updating modality %s failed: %s", modality_id, e)
        return jsonify({"error": "Error al actualizar la modalidad"}), 500


@bp.delete("/modalities/<int:modality_id>")
def delete_modality(modality_id: int):
    try:
        deleted = supabase.delete_modality(modality_id)
    except SupabaseError as e:
        log.exception("Deleting modality %s failed: %s", modality_id, e)
        return jsonify({"error": "Error al eliminar la modalidad"}), 500
    if deleted is None:
        return jsonify({"error": "Modalidad no encontrada"}), 404
    return jsonify({"message": "Modalidad eliminada", "deleted": deleted}), 200


# Tutorial status

@bp.get("/tutorial-status")
def list_tutorial_statuses():
    try:
        return jsonify(supabase.list_tutorial_statuses() or []), 200
    except SupabaseError as e:
        log.exception("Listing tutorial statuses failed: %s", e)
        return jsonify([]), 500


@bp.get("/tutorial-status/<int:status_id>")
def get_tutorial_status(status_id: int):
    try:
        return _row_or_404(supabase.get_tutorial_status(status_id), "Estado de tutorial no encontrado")
    except SupabaseError as e:
        log.exception("Fetching tutorial status %s failed: %s", status_id, e)
        return jsonify({"error": "Error al obtener el estado de tutorial"}), 500


@bp.get("/tutorial-status/user/<rut>")
def get_tutorial_status_for_user(rut: str):
    try:
        return _row_or_404(supabase.get_tutorial_status_for(rut), "Estado de tutorial no encontrado")
    except SupabaseError as e:
        log.exception("Fetching tutorial status for %s failed: %s", rut, e)
        return jsonify({"error": "Error al obtener el estado de tutorial del usuario"}), 500


@bp.post("/tutorial-status")
def create_tutorial_status():
    data = _body()
    rut, seen = data.get("rut"), data.get("seen")
    if _blank(rut) or seen is None:
        return jsonify({"error": "Los campos rut y seen son requeridos"}), 400
    if not isinstance(seen, bool):
        return jsonify({"error": "El campo seen debe ser true o false"}), 400
    try:
        created = supabase.create_tutorial_status(rut, seen)
        log.info("✅ Tutorial status created: %s", created)
        return jsonify(created), 201
    except SupabaseError as e:
        log.exception("Creating tutorial status failed: %s", e)
        return jsonify({"error": "Error al crear el estado de tutorial", "details": str(e)}), 500


@bp.put("/tutorial-status/<int:status_id>")
def update_tutorial_status(status_id: int):
    changes = _changes(_body(), ("rut", "seen"))
    if not changes:
        return jsonify({"error": "No hay cambios que aplicar"}), 400
    if "seen" in changes and not isinstance(changes["seen"], bool):
        return jsonify({"error": "El campo seen debe ser true o false"}), 400
    try:
        return _row_or_404(supabase.update_tutorial_status(status_id, changes), "Estado de tutorial no encontrado")
    except SupabaseError as e:
        log.exception("Updating tutorial status %s failed: %s", status_id, e)
        return jsonify({"error": "Error al actualizar el estado de tutorial"}), 500


@bp.delete("/tutorial-status/<int:status_id>")
def delete_tutorial_status(status_id: int):
    try:
        deleted = supabase.delete_tutorial_status(status_id)
    except SupabaseError as e:
        log.exception("Deleting tutorial status %s failed: %s", status_id, e)
        return jsonify({"error": "Error al eliminar el estado de tutorial"}), 500
    if deleted is None:
        return jsonify({"error": "Estado de tutorial no encontrado"}), 404
    return jsonify({"message": "Estado de tutorial eliminado", "deleted": deleted}), 200


@bp.post("/tutorial-completado")
def tutorial_completed():
    # A student counts as new the first time they finish the tutorial; later calls are no-ops.
    rut = _body().get("rut")
    if _blank(rut):
        return jsonify({"error": "El campo rut es requerido"}), 400
    try:
        existing = supabase.get_tutorial_status_for(rut)
        if existing is not None:
            log.info("ℹ️ %s already saw the tutorial", rut)
            return jsonify({"mensaje": "Usuario ya vio el tutorial", "data": existing}), 200
        created = supabase.create_tutorial_status(rut, True)
    except SupabaseError as e:
        log.exception("Marking tutorial done for %s failed: %s", rut, e)
        return jsonify({"error": "Error al actualizar tutorial_status", "details": str(e)}), 500
    log.info("✅ %s counted as a new user", rut)
    return jsonify({"mensaje": "Usuario contado como nuevo", "data": created}), 200


@bp.get("/usuarios-por-dia")
def users_per_day():
    args = request.args
    try:
        counts = reports.users_per_day(
            days=args.get("days", type=int),
            start=args.get("from"),
            end=args.get("to"),
        )
    except ReportRangeError as e:
        return jsonify({"error": str(e)}), 400
    except SupabaseError as e:
        log.exception("Daily user report failed: %s", e)
        return jsonify([]), 500
    return jsonify(counts), 200


# Ratings

@bp.get("/ratings")
def list_ratings():
    try:
        views = reports.rating_views()
    except SupabaseError as e:
        log.exception("Listing ratings failed: %s", e)
        return jsonify([]), 500
    log.info("✅ Ratings loaded: %d", len(views))
    return jsonify(views), 200


@bp.post("/ratings")
def create_rating():
    data = _body()
    rut, score = data.get("rut"), data.get("score")
    if _blank(rut) or _blank(score):
        log.info("❌ Missing rating fields: %s", data)
        return jsonify({"error": "Los campos rut y score son requeridos"}), 400
    try:
        created = supabase.create_rating(rut, score, data.get("comment"))
        log.info("✅ Rating created: %s", created)
        return jsonify(created), 201
    except SupabaseError as e:
        log.exception("Creating rating failed: %s", e)
        return jsonify({"error": "Error al crear la calificación", "details": str(e)}), 500


@bp.put("/ratings/<int:rating_id>")
def update_rating(rating_id: int):
    changes = _changes(_body(), ("rut", "score", "comment"))
    if not changes:
        return jsonify({"error": "No hay cambios que aplicar"}), 400
    try:
        return _row_or_404(supabase.update_rating(rating_id, changes), "Calificación no encontrada")
    except SupabaseError as e:
        log.exception("Updating rating %s failed: %s", rating_id, e)
        return jsonify({"error": "Error al actualizar la calificación"}), 500


@bp.delete("/ratings/<int:rating_id>")
def delete_rating(rating_id: int):
    try:
        deleted = supabase.delete_rating(rating_id)
    except SupabaseError as e:
        log.exception("Deleting rating %s failed: %s", rating_id, e)
        return jsonify({"error": "Error al eliminar la calificación"}), 500
    if deleted is None:
        return jsonify({"error": "Calificación no encontrada"}), 404
    return jsonify({"message": "Calificación eliminada", "deleted": deleted}), 200
