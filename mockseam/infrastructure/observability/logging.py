"""
Structured Logging for mockseam

Provides structured logging with a per-test context so that records emitted by
stub registration, interception and teardown can be traced back to the test
that produced them.
"""

import json
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

# Context variables for test tracking
test_id_var: ContextVar[Optional[str]] = ContextVar('test_id', default=None)


class LogLevel(Enum):
    """Log levels for the mockseam logging system"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
    LogLevel.CRITICAL: 4
}


class LogFormatter(ABC):
    """Abstract base class for log formatters"""

    @abstractmethod
    def format(self, record: Dict[str, Any]) -> str:
        """Format a log record into a string"""
        pass


class JSONLogFormatter(LogFormatter):
    """JSON formatter for structured logging"""

    def format(self, record: Dict[str, Any]) -> str:
        return json.dumps(record, default=str, ensure_ascii=False)


class HumanReadableFormatter(LogFormatter):
    """Single-line formatter for terminals and pytest's captured output"""

    def format(self, record: Dict[str, Any]) -> str:
        timestamp = record.get('timestamp', '')
        if 'T' in timestamp:
            date_part, time_part = timestamp.split('T', 1)
            timestamp = f"{date_part} {time_part.split('.')[0].rstrip('Z')}"

        level = record.get('level', 'INFO')
        logger_name = record.get('logger', 'unknown').split('.')[-1]
        message = f"[{timestamp}] {level:<8} [{logger_name:<12}] {record.get('message', '')}"

        if record.get('test_id'):
            message += f" (test={record['test_id']})"

        extra = record.get('extra')
        if extra:
            message += " " + " ".join(f"{k}={v}" for k, v in extra.items())
        return message


class LogHandler(ABC):
    """Abstract base class for log handlers"""

    def __init__(self, formatter: LogFormatter):
        self.formatter = formatter

    @abstractmethod
    def emit(self, record: Dict[str, Any]) -> None:
        """Emit a log record"""
        pass


class ConsoleLogHandler(LogHandler):
    """Console log handler that writes to a text stream"""

    def __init__(self, formatter: LogFormatter, stream: Optional[TextIO] = None):
        super().__init__(formatter)
        self.stream = stream

    def emit(self, record: Dict[str, Any]) -> None:
        # Resolved per call so pytest's capsys replacement of sys.stderr is honoured
        stream = self.stream or sys.stderr
        stream.write(self.formatter.format(record) + '\n')
        stream.flush()


class FileLogHandler(LogHandler):
    """File log handler that appends to a file"""

    def __init__(self, formatter: LogFormatter, file_path: Union[str, Path]):
        super().__init__(formatter)
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: Dict[str, Any]) -> None:
        with open(self.file_path, 'a', encoding='utf-8') as f:
            f.write(self.formatter.format(record) + '\n')


class MemoryLogHandler(LogHandler):
    """Keeps records in memory; used by tests asserting on log output"""

    def __init__(self, formatter: Optional[LogFormatter] = None):
        super().__init__(formatter or JSONLogFormatter())
        self.records: List[Dict[str, Any]] = []

    def emit(self, record: Dict[str, Any]) -> None:
        self.records.append(record)

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        return [
            r['message'] for r in self.records
            if level is None or r['level'] == level.value
        ]


class MockseamLogger:
    """
    Structured logger with test context support.

    Records are dictionaries carrying a timestamp, level, logger name, message,
    the active test id and any extra fields. Handlers decide how to render them.
    """

    def __init__(self, name: str, level: LogLevel = LogLevel.WARNING):
        self.name = name
        self.level = level
        self.handlers: List[LogHandler] = []

    def add_handler(self, handler: LogHandler) -> None:
        self.handlers.append(handler)

    def remove_handler(self, handler: LogHandler) -> None:
        if handler in self.handlers:
            self.handlers.remove(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.level = level

    def is_enabled_for(self, level: LogLevel) -> bool:
        return _LEVEL_ORDER[level] >= _LEVEL_ORDER[self.level]

    def _create_log_record(self, level: LogLevel, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        record = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': level.value,
            'logger': self.name,
            'message': message,
            'test_id': test_id_var.get(),
        }
        if extra:
            record['extra'] = extra

        # Drop unset context to keep records small
        return {k: v for k, v in record.items() if v is not None}

    def _log(self, level: LogLevel, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        if not self.is_enabled_for(level):
            return

        record = self._create_log_record(level, message, extra)
        for handler in self.handlers:
            try:
                handler.emit(record)
            except OSError as e:
                sys.stderr.write(f"Logging handler failed: {e}\n")

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: Optional[BaseException] = None) -> None:
        """Log error message with optional exception info"""
        if exc_info:
            extra = dict(extra or {})
            extra['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
                'module': type(exc_info).__module__
            }
        self._log(LogLevel.ERROR, message, extra)


@contextmanager
def test_context(test_id: str):
    """Attach ``test_id`` to every record logged inside the block."""
    token = test_id_var.set(test_id)
    try:
        yield test_id
    finally:
        test_id_var.reset(token)


# Not a test for pytest's collector
test_context.__test__ = False

# Global logger registry
_loggers: Dict[str, MockseamLogger] = {}

ROOT_LOGGER_NAME = "mockseam"


def get_logger(name: str, level: Optional[LogLevel] = None) -> MockseamLogger:
    """Get or create a logger instance.

    New loggers inherit the level and handlers of the ``mockseam`` root logger
    when it has been configured.
    """
    if name not in _loggers:
        root = _loggers.get(ROOT_LOGGER_NAME)
        logger = MockseamLogger(name, level or (root.level if root else LogLevel.WARNING))
        if root is not None and name != ROOT_LOGGER_NAME:
            for handler in root.handlers:
                logger.add_handler(handler)
        _loggers[name] = logger
    return _loggers[name]


def configure_default_logging(
    level: Union[LogLevel, str] = LogLevel.WARNING,
    use_json: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True
) -> None:
    """Configure every known logger and the root logger for future ones."""
    if isinstance(level, str):
        level = LogLevel[level.upper()]

    formatter = JSONLogFormatter() if use_json else HumanReadableFormatter()
    handlers: List[LogHandler] = []
    if console:
        handlers.append(ConsoleLogHandler(formatter))
    if log_file:
        handlers.append(FileLogHandler(JSONLogFormatter(), log_file))

    get_logger(ROOT_LOGGER_NAME)
    for logger in _loggers.values():
        logger.handlers = list(handlers)
        logger.set_level(level)


def configure_from_settings(settings: Any) -> None:
    """Apply a LoggingSettings model (see mockseam.configuration.models)."""
    configure_default_logging(
        level=settings.level,
        use_json=settings.format == "json",
        log_file=settings.file_path if settings.output in ("file", "both") else None,
        console=settings.output in ("console", "both")
    )


def reset_logging() -> None:
    """Forget all loggers; used between tests."""
    _loggers.clear()


def get_test_id() -> Optional[str]:
    return test_id_var.get()
