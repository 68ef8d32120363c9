from __future__ import annotations

import logging

import pytest

from pi5_provisioner.logging_utils import configure_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved = (list(root.handlers), root.level)
    for attr in ("_pi5_configured", "_pi5_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
    yield root
    for h in list(root.handlers):
        if h not in saved[0]:
            root.removeHandler(h)
            h.close()
    root.setLevel(saved[1])
    for attr in ("_pi5_configured", "_pi5_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


def test_writes_timestamped_severity_lines(clean_root_logger, tmp_path):
    log_path = tmp_path / "logs" / "pi5_setup.log"
    assert configure_logging(str(log_path)) == str(log_path)

    logging.getLogger("pi5_provisioner.test").warning("careful")
    for h in clean_root_logger.handlers:
        h.flush()

    text = log_path.read_text(encoding="utf-8")
    assert "WARNING pi5_provisioner.test: careful" in text
    assert "INFO pi5_provisioner.logging_utils: Logging initialized" in text


def test_second_call_is_a_no_op(clean_root_logger, tmp_path):
    first = configure_logging(str(tmp_path / "a.log"))
    count = len(clean_root_logger.handlers)
    assert configure_logging(str(tmp_path / "b.log")) == first
    assert len(clean_root_logger.handlers) == count
