import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from generated_maps import create_app  # noqa: E402
from generated_maps.routes.maps_api import clear_cache  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True, "MAPS_DISABLE_CACHE": False, "MAPS_CACHE_MAX": 8})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep DUNGEON_* / MAPS_* overrides from a developer shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("DUNGEON_") or key in ("MAPS_LOG_LEVEL", "MAPS_LOG_JSON"):
            monkeypatch.delenv(key, raising=False)
    clear_cache()
    yield
    clear_cache()
