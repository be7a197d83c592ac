"""Logging helpers printing verification progress, coloured by outcome."""

import enum
import logging
import os
import sys
import typing

ROOT_LOGGER = "persistence_specification"


class Color(enum.Enum):
    RED = "\033[31m"
    GREEN = "\033[32m"


RESET = "\033[0m"

LEVEL_COLORS = {logging.ERROR: Color.RED, logging.WARNING: Color.RED, logging.CRITICAL: Color.RED}


class ColoredFormatter(logging.Formatter):
    def __init__(self, fmt: typing.Optional[str] = None, colored: bool = True) -> None:
        super().__init__(fmt)
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.colored:
            return message
        color = getattr(record, "color", None) or LEVEL_COLORS.get(record.levelno)
        if color is None:
            return message
        return f"{color.value}{message}{RESET}"


class _PackageHandler(logging.StreamHandler):
    pass


def _wants_color(stream: typing.TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(
    level: int = logging.INFO, stream: typing.Optional[typing.TextIO] = None, colored: typing.Optional[bool] = None
) -> logging.Logger:
    """Installs the single stream handler of the package logger.

    Calling it again replaces the handler, so tests and scripts can redirect
    the output or change the level after the first message was logged.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    stream = stream or sys.stderr
    if colored is None:
        colored = _wants_color(stream)

    for handler in list(logger.handlers):
        if isinstance(handler, _PackageHandler):
            logger.removeHandler(handler)

    handler = _PackageHandler(stream)
    handler.setFormatter(ColoredFormatter("%(message)s", colored=colored))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def green(logger: logging.Logger, message: str, *args: typing.Any) -> None:
    logger.info(message, *args, extra={"color": Color.GREEN})


def red(logger: logging.Logger, message: str, *args: typing.Any) -> None:
    logger.error(message, *args, extra={"color": Color.RED})
