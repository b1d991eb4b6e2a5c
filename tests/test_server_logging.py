import logging
from logging.handlers import RotatingFileHandler

import pytest

from generated_maps.server import LOG_FILE, _configure_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_log_level_follows_env(monkeypatch, tmp_path, restore_root_logging):
    monkeypatch.setenv("MAPS_LOG_LEVEL", "warn")
    path = _configure_logging(str(tmp_path))
    root = restore_root_logging
    assert path == str(tmp_path / LOG_FILE)
    assert root.level == logging.WARNING
    assert all(h.level == logging.WARNING for h in root.handlers)


def test_reconfigure_does_not_stack_handlers(tmp_path, restore_root_logging):
    _configure_logging(str(tmp_path))
    _configure_logging(str(tmp_path))
    root = restore_root_logging
    assert root.level == logging.INFO
    assert sum(isinstance(h, RotatingFileHandler) for h in root.handlers) == 1
    assert len(root.handlers) == 2
