from __future__ import annotations

import logging
from pathlib import Path

import pytest

from slowhttp_launcher.logging_utils import configure_logging

GUARD_ATTR = "_slowhttp_log_path"


def _ours(handlers):
    # pytest installs its own capture handlers on the root logger.
    return [h for h in handlers if type(h) in (logging.FileHandler, logging.StreamHandler)]


@pytest.fixture
def root_logger():
    """Root logger with the configure guard cleared; added handlers are removed afterwards."""

    root = logging.getLogger()
    saved_level = root.level
    if hasattr(root, GUARD_ATTR):
        delattr(root, GUARD_ATTR)
    before = list(root.handlers)

    def added():
        return [h for h in root.handlers if h not in before]

    root.added_handlers = added
    yield root

    for h in _ours(added()):
        root.removeHandler(h)
        h.close()
    del root.added_handlers
    root.setLevel(saved_level)
    if hasattr(root, GUARD_ATTR):
        delattr(root, GUARD_ATTR)


def test_writes_to_requested_file(root_logger, tmp_path: Path):
    log_path = tmp_path / "logs" / "launcher.log"
    assert configure_logging(str(log_path), verbose=True, console=False) == str(log_path)

    logging.getLogger("slowhttp_launcher.test").info("hello from test")
    for h in _ours(root_logger.added_handlers()):
        h.flush()
    assert "INFO slowhttp_launcher.test: hello from test" in log_path.read_text(encoding="utf-8")


def test_quiet_by_default(root_logger):
    configure_logging(console=False)
    assert root_logger.level == logging.WARNING


def test_second_call_only_adjusts_level(root_logger, tmp_path: Path):
    log_path = str(tmp_path / "a.log")
    configure_logging(log_path, console=False)
    count = len(root_logger.added_handlers())

    assert configure_logging(str(tmp_path / "b.log"), verbose=True, console=False) == log_path
    assert len(root_logger.added_handlers()) == count
    assert root_logger.level == logging.DEBUG
    assert not (tmp_path / "b.log").exists()


def test_console_only(root_logger):
    assert configure_logging(verbose=True) is None
    ours = _ours(root_logger.added_handlers())
    assert len(ours) == 1
    assert type(ours[0]) is logging.StreamHandler
