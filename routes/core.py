from __future__ import annotations
from datetime import datetime, timezone
from flask import Blueprint, jsonify
from config import BACKEND_URL, BOT_NAME

bp = Blueprint("core", __name__)


def _now():
    return datetime.now(timezone.utc).isoformat()


@bp.get("/")
def status():
    return jsonify({
        "status": "Bot activo ✅",
        "message": f"{BOT_NAME} funcionando correctamente",
        "webhook": "/webhook",
        "timestamp": _now(),
    }), 200


@bp.get("/api/health")
def health():
    return jsonify({"status": "ok", "timestamp": _now(), "server": f"Backend {BOT_NAME} funcionando"}), 200


@bp.get("/api/webhook-url")
def webhook_url():
    return jsonify({
        "backend_url": BACKEND_URL,
        "webhook_url": f"{BACKEND_URL}/webhook",
        "api_base": BACKEND_URL,
        "status": "active",
    }), 200
