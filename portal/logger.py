"""
Structured JSON Logging.

Every component receives a ``StructuredLogger`` through its constructor.
Records are emitted one JSON object per line to stdout and, unless
disabled, to a size-rotated log file configured in ``AppConfig``.

Bearer tokens and passwords must never reach a log sink: any ``extra``
field whose name looks like a credential is masked by the formatter.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, TextIO

ROOT_LOGGER_NAME: str = "portal"

_REDACTED: str = "***"
_SENSITIVE_KEY_RE: re.Pattern[str] = re.compile(
    r"token|password|authorization|secret", re.IGNORECASE,
)


def _json_value(value: Any) -> Any:
    """Keep JSON scalars as-is so log processors can filter on them."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``timestamp`` (UTC ISO-8601), ``level``, ``logger_name``,
    ``message``, then ``extra`` for caller-supplied fields and
    ``exception`` when a traceback is attached.
    """

    _RESERVED: frozenset[str] = frozenset(
        logging.makeLogRecord({}).__dict__
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: _REDACTED if _SENSITIVE_KEY_RE.search(key) else _json_value(value)
            for key, value in record.__dict__.items()
            if key not in self._RESERVED
        }
        if extra:
            entry["extra"] = extra

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, ensure_ascii=False)


class StructuredLogger:
    """Injectable wrapper around a named ``logging.Logger``.

    Handlers are attached once per logger name, so building several
    ``StructuredLogger`` objects for the same name is cheap and never
    duplicates output.

    Usage::

        log = StructuredLogger(name="portal.api")
        log.info("GET %s -> %d", "/tna/list", 200)
        log.info("Review recorded", extra={"event": "TNA_REVIEW", "entity_id": "e1"})
    """

    def __init__(
        self,
        name: str = ROOT_LOGGER_NAME,
        level: Optional[int] = None,
        stream: Optional[TextIO] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
        file_logging: bool = True,
    ) -> None:
        self._logger: logging.Logger = logging.getLogger(name)
        if self._logger.handlers:
            return

        if level is None:
            level = _configured_level() if file_logging else logging.INFO
        self._logger.setLevel(level)
        self._logger.propagate = False
        formatter = JSONFormatter()

        console = logging.StreamHandler(stream or sys.stdout)
        console.setFormatter(formatter)
        self._logger.addHandler(console)

        if file_logging:
            self._attach_file(formatter, log_file, max_bytes, backup_count)

    def _attach_file(
        self,
        formatter: logging.Formatter,
        log_file: Optional[str],
        max_bytes: Optional[int],
        backup_count: Optional[int],
    ) -> None:
        """Add the rotating file sink; console-only when the file cannot be opened."""
        from portal.config import get_config

        cfg = get_config()
        path = Path(log_file or cfg.LOG_FILE)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=str(path),
                maxBytes=cfg.LOG_MAX_BYTES if max_bytes is None else max_bytes,
                backupCount=cfg.LOG_BACKUP_COUNT if backup_count is None else backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            self._logger.warning("Log file %s unavailable (%s); console only.", path, exc)
            return
        handler.setFormatter(formatter)
        self._logger.addHandler(handler)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def name(self) -> str:
        return self._logger.name

    def child(self, suffix: str) -> "StructuredLogger":
        """Logger for a sub-component, sharing this logger's handlers."""
        wrapper = StructuredLogger.__new__(StructuredLogger)
        wrapper._logger = self._logger.getChild(suffix)
        return wrapper

    def debug(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg: str, *args: object, **kwargs: Any) -> None:
        """``error`` with the active traceback attached."""
        self._logger.exception(msg, *args, **kwargs)

    def critical(self, msg: str, *args: object, **kwargs: Any) -> None:
        self._logger.critical(msg, *args, **kwargs)


def _configured_level() -> int:
    from portal.config import get_config

    return int(getattr(logging, get_config().LOG_LEVEL))


def get_logger(name: str = ROOT_LOGGER_NAME) -> StructuredLogger:
    """``StructuredLogger`` for *name*, namespaced under ``portal``."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return StructuredLogger(name=name)
