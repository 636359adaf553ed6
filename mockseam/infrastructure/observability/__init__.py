"""
Observability - structured logging for mockseam.
"""

from .logging import (
    MockseamLogger, LogLevel, LogFormatter, LogHandler, JSONLogFormatter,
    HumanReadableFormatter, ConsoleLogHandler, FileLogHandler, MemoryLogHandler,
    get_logger, configure_default_logging, configure_from_settings, reset_logging,
    test_context, get_test_id
)

__all__ = [
    "MockseamLogger",
    "LogLevel",
    "LogFormatter",
    "LogHandler",
    "JSONLogFormatter",
    "HumanReadableFormatter",
    "ConsoleLogHandler",
    "FileLogHandler",
    "MemoryLogHandler",
    "get_logger",
    "configure_default_logging",
    "configure_from_settings",
    "reset_logging",
    "test_context",
    "get_test_id",
]
