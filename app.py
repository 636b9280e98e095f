import logging
from flask import Flask
from config import ENABLE_ADMIN_API, ENABLE_DEBUG_ROUTES, PORT, missing_settings
from routes.core import bp as core_bp
from routes.webhook import bp as webhook_bp

log = logging.getLogger(__name__)

# I'm bootstrapping the Flask app here so future me remembers where it all starts.
app = Flask(__name__)
# Spanish replies and names go out as-is, not as \u escapes.
app.json.ensure_ascii = False
# Status routes and the WhatsApp webhook; the bot is dead without these two.
app.register_blueprint(core_bp)
app.register_blueprint(webhook_bp)
if ENABLE_ADMIN_API:
    # The dashboard's CRUD lives behind this flag.
    from routes.admin import bp as admin_bp
    app.register_blueprint(admin_bp)
if ENABLE_DEBUG_ROUTES:
    # Debug routes for when I need to poke at someone's state. Keep these off in prod.
    from routes.debug import bp as debug_bp
    app.register_blueprint(debug_bp)

# Shouting early beats finding out from a failed send later.
for name in missing_settings():
    log.warning("⚠️ %s is not set; related calls will fail", name)

if __name__ == "__main__":
    # Running the dev server directly because that's how I like to test.
    app.run(host="0.0.0.0", port=PORT)
