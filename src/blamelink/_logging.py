"""
Logging setup for the blamelink command line.

Library modules (backend, history_cache, attributor) only create named loggers with
getLogger(__name__) and never add handlers or set levels. A host renderer that
embeds a LineAttributor therefore keeps full control over its own logging setup;
blame failures arrive at its handlers as INFO records of blamelink.history_cache.

Only cli.main() calls ini_for_cli(), which sets the root level from the -v count and
adds a stderr handler, and removes that handler again when the command is done.
"""

import logging
import sys
from logging import Formatter, StreamHandler, getLogger

import colorlog

from blamelink.constants import DEFAULT_VERBOSITY

FORMAT = "%(levelname)s %(name)s %(funcName)s %(lineno)s\n%(message)s\n"
FORMAT_INFO = "%(message)s"


def ini_for_cli(verbosity: int = DEFAULT_VERBOSITY) -> StreamHandler:
    set_logging_level_from_verbosity(verbosity)
    handler = add_cli_handler()
    return handler


def set_logging_level_from_verbosity(verbosity: int | None) -> None:
    root_logger = getLogger()
    if verbosity is None:
        verbosity = DEFAULT_VERBOSITY
    match verbosity:
        case 0:
            root_logger.setLevel(logging.WARNING)  # verbosity == 0
        case 1:
            root_logger.setLevel(logging.INFO)  # verbosity == 1
        case 2:
            root_logger.setLevel(logging.DEBUG)  # verbosity == 2
        case _:
            raise ValueError(f"Unknown verbosity level: {verbosity}")


def add_cli_handler() -> StreamHandler:
    cli_handler = StreamHandler()
    if sys.stderr.isatty():
        cli_handler.setFormatter(get_custom_cli_color_formatter())
    else:
        cli_handler.setFormatter(get_custom_formatter())
    getLogger().addHandler(cli_handler)
    return cli_handler


def remove_cli_handler(handler: StreamHandler) -> None:
    getLogger().removeHandler(handler)


def get_custom_cli_color_formatter() -> "CustomColoredFormatter":
    return CustomColoredFormatter(
        "%(log_color)s" + FORMAT,
        info_fmt="%(log_color)s" + FORMAT_INFO,  # Different format for INFO level
        reset=True,
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        style="%",
    )


def get_custom_formatter() -> "CustomFormatter":
    return CustomFormatter(FORMAT, info_fmt=FORMAT_INFO)


class _InfoFormatMixin:
    info_fmt: str

    def format(self, record):
        if record.levelno == logging.INFO:
            original_fmt = self._style._fmt  # type: ignore
            self._style._fmt = self.info_fmt  # type: ignore
            result = super().format(record)  # type: ignore
            self._style._fmt = original_fmt  # type: ignore
            return result
        else:
            return super().format(record)  # type: ignore


# Plain formatter, for output that is not a terminal
class CustomFormatter(_InfoFormatMixin, Formatter):
    def __init__(self, fmt, info_fmt, *args, **kwargs):
        super().__init__(fmt, *args, **kwargs)
        self.default_fmt = fmt
        self.info_fmt = info_fmt


class CustomColoredFormatter(_InfoFormatMixin, colorlog.ColoredFormatter):
    def __init__(self, fmt, info_fmt, *args, **kwargs):
        super().__init__(fmt, *args, **kwargs)
        self.default_fmt = fmt
        self.info_fmt = info_fmt
