"""
Flet user interface.

Navigation layout, the builder and settings views, and the bridge that
routes worker log records to the on-screen log.
"""
from .log_handler import PubSubLogHandler, create_console_handler, setup_logger

__all__ = [
    "PubSubLogHandler",
    "setup_logger",
    "create_console_handler",
]
