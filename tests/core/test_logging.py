"""Tests for the logging setup."""
import json
import logging

import pytest
import structlog
from structlog.stdlib import ProcessorFormatter

from faceapp.core.logging import (
    NOISY_LOGGERS,
    bind_log_context,
    clear_log_context,
    log_context,
    setup_logging,
)


@pytest.fixture
def json_logging(capsys):
    """Configure JSON logging into captured stdout, removing the handler afterwards."""
    root = logging.getLogger()
    saved_level = root.level

    setup_logging(level="debug", json_logs=True)
    capsys.readouterr()

    def lines():
        return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]

    yield lines

    clear_log_context()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(saved_level)


def test_level_and_handler_are_installed(json_logging):
    root = logging.getLogger()

    assert root.level == logging.DEBUG
    assert len([h for h in root.handlers if isinstance(h.formatter, ProcessorFormatter)]) == 1
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_cycle_context_is_merged_into_events(json_logging):
    logger = structlog.get_logger("faceapp.tests")

    with log_context(cycle=3):
        logger.info("Recognized face", name="Alice")
    logger.info("Between cycles")

    inside, outside = json_logging()[-2:]
    assert inside["event"] == "Recognized face"
    assert inside["cycle"] == 3
    assert inside["name"] == "Alice"
    assert inside["level"] == "info"
    assert inside["logger"] == "faceapp.tests"
    assert "timestamp" in inside
    assert "cycle" not in outside


def test_standard_library_records_share_the_format(json_logging):
    bind_log_context(camera_index=1)

    logging.getLogger("firebase_admin").warning("token refresh slow")

    record = json_logging()[-1]
    assert record["event"] == "token refresh slow"
    assert record["level"] == "warning"
    assert record["logger"] == "firebase_admin"
    assert record["camera_index"] == 1
    assert "timestamp" in record
    assert "_record" not in record
