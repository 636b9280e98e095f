import os
import logging
from dotenv import load_dotenv

# Pulling in .env before logging so LOG_LEVEL there actually counts.
load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def _as_bool(v: str | None, default=False):
    # Tiny helper so I stop rewriting the same truthy checks everywhere.
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}

def _as_list(v: str | None, default: list[str]):
    # Comma-separated env values, lowercased since I only ever compare them that way.
    if not v:
        return list(default)
    return [s.strip().lower() for s in v.split(",") if s.strip()]

# Meta / WhatsApp Cloud API bits; the bot is mute without these.
WHATSAPP_ACCESS_TOKEN = os.getenv("WHATSAPP_ACCESS_TOKEN") or os.getenv("ACCESS_TOKEN") or ""
PHONE_NUMBER_ID       = os.getenv("PHONE_NUMBER_ID") or ""
VERIFY_TOKEN          = os.getenv("VERIFY_TOKEN") or ""
GRAPH_API_VERSION     = os.getenv("GRAPH_API_VERSION", "v18.0")

# Supabase over plain PostgREST. Table names match the dashboard's schema, casing and all.
SUPABASE_URL = (os.getenv("SUPABASE_URL") or "").rstrip("/")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or ""
CATEGORY_TABLE = os.getenv("CATEGORY_TABLE", "Category")
QUESTION_TABLE = os.getenv("QUESTION_TABLE", "Questions")
USER_TABLE     = os.getenv("USER_TABLE", "User")
MODALITY_TABLE = os.getenv("MODALITY_TABLE", "Modality")
TUTORIAL_TABLE = os.getenv("TUTORIAL_TABLE", "Tutorial_status")
RATING_TABLE   = os.getenv("RATING_TABLE", "Rating")

# Misc knobs I might tweak later.
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "12.0"))
BACKEND_URL  = (os.getenv("BACKEND_URL") or "http://localhost:5000").rstrip("/")
PORT         = int(os.getenv("PORT", "5000"))
REPORT_DEFAULT_DAYS = int(os.getenv("REPORT_DEFAULT_DAYS", "30"))
REPORT_MAX_DAYS     = int(os.getenv("REPORT_MAX_DAYS", "3660"))

# Wording knobs so the greeting list can change without a deploy.
BOT_NAME = os.getenv("BOT_NAME", "DucoChat")
GREETING_KEYWORDS = _as_list(
    os.getenv("GREETING_KEYWORDS"),
    ["hi", "hola", "menu", "opciones", "inicio", "ayuda", "hola, necesito ayuda"],
)
BRAND_KEYWORD = (os.getenv("BRAND_KEYWORD", "duco") or "").strip().lower()
MENU_COMMANDS = ("menu", "menú")

# Feature flags I flip on and off when experimenting.
WEBHOOK_ASYNC       = _as_bool(os.getenv("WEBHOOK_ASYNC"), True)
ENABLE_ADMIN_API    = _as_bool(os.getenv("ENABLE_ADMIN_API"), True)
ENABLE_DEBUG_ROUTES = _as_bool(os.getenv("ENABLE_DEBUG_ROUTES"), False)

# The app still boots without these, it just nags about them on startup.
REQUIRED_SETTINGS = (
    "WHATSAPP_ACCESS_TOKEN",
    "PHONE_NUMBER_ID",
    "VERIFY_TOKEN",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
)

def missing_settings() -> list[str]:
    """Names of required settings that came through empty."""
    return [name for name in REQUIRED_SETTINGS if not globals().get(name)]
