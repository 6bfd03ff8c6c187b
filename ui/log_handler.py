"""
Logging bridge between worker threads and the Flet log view.

Worker loggers forward each formatted record, together with its
level name, to a callback that typically publishes on a PubSub topic.
"""
from __future__ import annotations

import logging
from typing import Callable, Iterable

LogCallback = Callable[[str, str], None]

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%H:%M:%S"


class PubSubLogHandler(logging.Handler):
    """
    Logging handler that forwards (level, message) pairs to a callback.

    The level lets the UI color warnings and errors.
    """

    def __init__(self, callback: LogCallback):
        """
        Args:
            callback: Called with (levelname, formatted message).
        """
        super().__init__()
        self.callback = callback
        self.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.callback(record.levelname, self.format(record))
        except Exception:
            self.handleError(record)


def setup_logger(
    name: str,
    callback: LogCallback,
    level: int = logging.INFO,
    extra_loggers: Iterable[str] = (),
) -> logging.Logger:
    """
    Route a logger (and optionally library loggers) to the UI.

    The worker logger stops propagating so UI messages are not
    duplicated on the console; `extra_loggers` (e.g. "core") keep
    propagating and just gain the UI handler.

    Args:
        name: Worker logger name.
        callback: Receives (levelname, message) for every record.
        level: Minimum level forwarded (default: INFO).
        extra_loggers: Other logger names to forward as well.

    Returns:
        The configured worker logger.

    Example:
        ```python
        logger = setup_logger(
            "toc",
            lambda level, msg: page.pubsub.send_all_on_topic("log", (level, msg)),
            extra_loggers=["core"],
        )
        ```
    """
    handler = PubSubLogHandler(callback)
    handler.setLevel(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    _replace_ui_handler(logger, handler)
    logger.propagate = False

    for extra in extra_loggers:
        extra_logger = logging.getLogger(extra)
        if extra_logger.level == logging.NOTSET or extra_logger.level > level:
            extra_logger.setLevel(level)
        _replace_ui_handler(extra_logger, handler)

    return logger


def _replace_ui_handler(logger: logging.Logger, handler: PubSubLogHandler) -> None:
    """Swap any previous UI handler so repeated setup does not duplicate lines."""
    for existing in list(logger.handlers):
        if isinstance(existing, PubSubLogHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)


def create_console_handler(level: int = logging.DEBUG) -> logging.Handler:
    """
    Create a console handler for development/debugging.

    Args:
        level: Logging level (default: DEBUG).

    Returns:
        Configured StreamHandler.
    """
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt=LOG_DATEFMT
    ))
    return handler
