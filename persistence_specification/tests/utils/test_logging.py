import io
import logging
from typing import Generator

import pytest
from _pytest.monkeypatch import MonkeyPatch

from persistence_specification.utils.logging import (
    ROOT_LOGGER,
    Color,
    ColoredFormatter,
    _PackageHandler,
    configure_logging,
    get_logger,
    green,
    red,
)


class Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.fixture()
def restore_logging() -> Generator[None, None, None]:
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def make_record(level: int, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("test", level, __file__, 1, "Rolling back all transactions", None, None)
    record.__dict__.update(extra)
    return record


@pytest.mark.parametrize(
    "record, expected",
    [
        (make_record(logging.INFO, color=Color.GREEN), "\033[32mRolling back all transactions\033[0m"),
        (make_record(logging.ERROR), "\033[31mRolling back all transactions\033[0m"),
        (make_record(logging.INFO), "Rolling back all transactions"),
    ],
)
def test_colours_by_outcome_then_level(record: logging.LogRecord, expected: str) -> None:
    assert ColoredFormatter("%(message)s").format(record) == expected


def test_colour_can_be_disabled() -> None:
    record = make_record(logging.INFO, color=Color.GREEN)

    assert ColoredFormatter("%(message)s", colored=False).format(record) == "Rolling back all transactions"


@pytest.mark.usefixtures("restore_logging")
def test_colours_terminals_only(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    terminal, pipe = Terminal(), io.StringIO()

    configure_logging(stream=terminal)
    green(get_logger("test"), "Assertion Succeeded! Expected: %s Actual: %s", 1, 1)
    configure_logging(stream=pipe)
    red(get_logger("test"), "Assertion failed! Expected: %s Actual: %s", 1, 2)

    assert terminal.getvalue() == "\033[32mAssertion Succeeded! Expected: 1 Actual: 1\033[0m\n"
    assert pipe.getvalue() == "Assertion failed! Expected: 1 Actual: 2\n"


@pytest.mark.usefixtures("restore_logging")
def test_respects_no_color(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    terminal = Terminal()

    configure_logging(stream=terminal)
    red(get_logger("test"), "Error: %s", "boom")

    assert terminal.getvalue() == "Error: boom\n"


@pytest.mark.usefixtures("restore_logging")
def test_reconfiguring_replaces_handler() -> None:
    logger = logging.getLogger(ROOT_LOGGER)
    own = logging.StreamHandler(io.StringIO())
    logger.addHandler(own)

    configure_logging(stream=io.StringIO())
    configure_logging(level=logging.WARNING, stream=io.StringIO())

    assert len([handler for handler in logger.handlers if isinstance(handler, _PackageHandler)]) == 1
    assert own in logger.handlers
    assert logger.level == logging.WARNING
