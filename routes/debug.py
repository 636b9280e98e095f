from __future__ import annotations
from flask import Blueprint, jsonify
from logic.menu import build_menu
from logic.state import state_to_dict
from routes import webhook

bp = Blueprint("debug", __name__)

@bp.get("/debug/state/<user_id>")
def debug_state(user_id: str):
    state = webhook.NAVIGATOR.store.get(user_id)
    return jsonify({"user_id": user_id, **state_to_dict(state)}), 200

@bp.get("/debug/menu")
def debug_menu():
    menu = build_menu()
    return jsonify({
        "failed": menu.failed,
        "categories": [{"id": c.id, "name": c.name} for c in menu.categories],
        "text": menu.text,
    }), 200
