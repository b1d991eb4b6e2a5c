"""
project: Generated Maps
module: __init__.py
License: MIT

Flask application setup.

The map generator is a plain library (``generated_maps.dungeon``); this module
wires it into a small JSON API. Configuration is sourced from environment
variables with reasonable defaults for development. A local `instance/`
directory holds the rotating server log.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so `SECRET_KEY`, `MAPS_*` and `DUNGEON_*` values can be
# supplied without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # read-only installs still serve requests; only the file log is lost
    pass


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    MAPS_DEFAULT_ALGORITHM=os.getenv("MAPS_DEFAULT_ALGORITHM", "donjon").strip().lower() or "donjon",
    MAPS_CACHE_MAX=max(0, _env_int("MAPS_CACHE_MAX", 8)),
    MAPS_DISABLE_CACHE=os.getenv("MAPS_DISABLE_CACHE", "0").lower() in ("1", "true", "yes", "on"),
)

# Register HTTP blueprints (import after app is configured)
from generated_maps.routes.maps_api import bp_maps  # noqa: E402

app.register_blueprint(bp_maps)


def create_app(**overrides):
    """Return the Flask app instance with optional config overrides applied."""
    if overrides:
        app.config.update(overrides)
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
