"""Tests for logging setup and context-prefixed loggers."""

import logging
from pathlib import Path

import pytest

from deepresearch.utils.logging import StructuredLogger, setup_logging


def test_context_prefix(caplog: pytest.LogCaptureFixture) -> None:
    log = StructuredLogger("deepresearch.test", run_id="a1b2")

    with caplog.at_level(logging.INFO, logger="deepresearch.test"):
        log.info("Planning research")
        log.bind(area="Market").warning("search failed")

    assert [r.getMessage() for r in caplog.records] == [
        "[run_id=a1b2] Planning research",
        "[run_id=a1b2 area=Market] search failed",
    ]


def test_no_context_leaves_message_alone(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="deepresearch.test"):
        StructuredLogger("deepresearch.test").info("plain")

    assert caplog.records[-1].getMessage() == "plain"


def test_setup_logging_file_and_quiet_clients(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level

    try:
        setup_logging(level="debug", log_file=log_file)
        logging.getLogger("deepresearch.test").info("to file")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert root.level == logging.DEBUG
        for handler in root.handlers:
            handler.flush()
        assert "to file" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
