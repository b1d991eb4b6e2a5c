"""
project: Generated Maps
module: server.py
License: MIT

Server bootstrap: logging setup and the development HTTP server.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from generated_maps import app
from generated_maps.logging_utils import current_level

LOG_FILE = "maps.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUPS = 3


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Configure logging and run the Flask server until interrupted."""
    _configure_logging()
    try:
        print(f"[INFO] Starting map server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(log_dir: str | None = None) -> str:
    """Send stdlib logging to ``<instance>/maps.log`` and the console.

    The threshold follows ``MAPS_LOG_LEVEL``, the same variable the
    structured logger reads.
    """
    log_dir = log_dir or app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, LOG_FILE)
    level = current_level()

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter("%(asctime)s level=%(levelname)s logger=%(name)s %(message)s")

    handlers = [
        RotatingFileHandler(log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"),
        logging.StreamHandler(sys.stderr),
    ]
    # reconfiguring replaces handlers rather than stacking them
    for h in list(root.handlers):
        root.removeHandler(h)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return log_path
