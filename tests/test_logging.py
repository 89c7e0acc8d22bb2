"""Tests for the patternlibrary logger tree."""

from __future__ import annotations

import io
import logging

from patternlibrary.logging import configure_logging, get_logger, owned_handlers, set_verbosity


def test_get_logger_nests_below_the_package_logger() -> None:
    assert get_logger().name == "patternlibrary"
    assert get_logger("scanner").parent is get_logger()


def test_configure_logging_replaces_its_own_handlers_only() -> None:
    logger = get_logger()
    foreign = logging.NullHandler()
    logger.addHandler(foreign)

    configure_logging()
    configure_logging()

    assert len(owned_handlers(logger)) == 1
    assert foreign in logger.handlers
    assert logger.propagate is False


def test_verbosity_switches_logger_and_handlers() -> None:
    stream = io.StringIO()
    configure_logging(stream=stream)
    get_logger("pipeline").debug("hidden")

    set_verbosity(True)
    get_logger("pipeline").debug("shown")

    assert get_logger().level == logging.DEBUG
    assert all(handler.level == logging.DEBUG for handler in owned_handlers(get_logger()))
    assert stream.getvalue() == "[patternlibrary] DEBUG shown\n"


def test_log_file_receives_timestamped_records(tmp_path) -> None:
    log_file = tmp_path / "logs" / "build.log"
    configure_logging(verbose=True, log_file=log_file, stream=io.StringIO())

    get_logger("scanner").debug("scanned %d file(s)", 3)

    line = log_file.read_text(encoding="utf-8").strip()
    assert line.endswith("DEBUG patternlibrary.scanner: scanned 3 file(s)")
