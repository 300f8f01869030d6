"""Logging context for zpages: level allow-list, text/json formatting, structured transition logs."""

import json
import logging
import sys
import threading
import time
from typing import Any, Dict, IO, Optional, Tuple

from zpages.core.state.enums import LogFormat, LogLevelName

logger = logging.getLogger(__name__)

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# PANIC and FATAL have no stdlib counterpart below CRITICAL
_PY_LEVELS: Dict[LogLevelName, int] = {
    LogLevelName.PANIC: logging.CRITICAL,
    LogLevelName.FATAL: logging.CRITICAL,
    LogLevelName.ERROR: logging.ERROR,
    LogLevelName.WARNING: logging.WARNING,
    LogLevelName.INFO: logging.INFO,
    LogLevelName.DEBUG: logging.DEBUG,
    LogLevelName.TRACE: TRACE,
}

_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def resolve_level(name: Optional[str]) -> LogLevelName:
    """Match a level name exactly against the allow-list. Anything else becomes INFO."""
    try:
        return LogLevelName(name)
    except ValueError:
        return LogLevelName.INFO


def resolve_format(name: Optional[str]) -> LogFormat:
    """Match a format name exactly against text/json. Anything else is text."""
    try:
        return LogFormat(name)
    except ValueError:
        return LogFormat.TEXT


def python_level(level: LogLevelName) -> int:
    return _PY_LEVELS[level]


class JsonFormatter(logging.Formatter):
    """One JSON object per line: time, level, logger, msg; func/file when caller reporting is on."""

    def __init__(self, report_caller: bool = False):
        super().__init__(datefmt=_DATEFMT)
        self.report_caller = report_caller

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if self.report_caller:
            payload["func"] = record.funcName
            payload["file"] = f"{record.pathname}:{record.lineno}"
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def build_formatter(log_format: LogFormat, debug: int) -> logging.Formatter:
    """Formatter for the given format and debug tier.

    Tier > 0 adds full timestamps to text output; tier > 2 adds caller location.
    JSON output always carries a timestamp.
    """
    if log_format == LogFormat.JSON:
        return JsonFormatter(report_caller=debug > 2)
    parts = []
    if debug > 0:
        parts.append("%(asctime)s")
    parts.append("%(levelname)s %(name)s:")
    if debug > 2:
        parts.append("[%(module)s:%(funcName)s:%(lineno)d]")
    parts.append("%(message)s")
    return logging.Formatter(" ".join(parts), datefmt=_DATEFMT)


class LogContext:
    """Explicitly constructed logging state passed to handlers.

    Owns one stream handler on the ``zpages`` logger and the active
    (level, debug tier, format) triple. Thread-safe.
    """

    def __init__(
        self,
        logger_name: str = "zpages",
        stream: Optional[IO[str]] = None,
        propagate: bool = False,
    ):
        self._lock = threading.Lock()
        self._logger = logging.getLogger(logger_name)
        self._logger.propagate = propagate
        # one context handler per logger; a newer context replaces the older one
        for existing in list(self._logger.handlers):
            if getattr(existing, "_zpages_context", False):
                self._logger.removeHandler(existing)
        self._handler = logging.StreamHandler(stream or sys.stdout)
        self._handler._zpages_context = True
        self._logger.addHandler(self._handler)

        self._level = LogLevelName.INFO
        self._debug = 0
        self._format = LogFormat.TEXT
        self.apply(self._level.value, self._debug, self._format.value)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def format(self) -> LogFormat:
        with self._lock:
            return self._format

    def apply(self, level: Optional[str], debug: int, log_format: Optional[str]) -> Tuple[LogLevelName, int, LogFormat]:
        """Set level, debug tier and format. Returns the effective (normalized) values."""
        lvl = resolve_level(level)
        fmt = resolve_format(log_format)
        with self._lock:
            self._level = lvl
            self._debug = int(debug)
            self._format = fmt
            self._logger.setLevel(python_level(lvl))
            self._handler.setFormatter(build_formatter(fmt, self._debug))
        return lvl, int(debug), fmt

    def snapshot(self) -> Dict[str, Any]:
        """Current settings in LogLevel wire form."""
        with self._lock:
            return {"log": self._level.value, "debug": self._debug, "format": self._format.value}

    def verbose(self, tier: int) -> bool:
        """True when the debug tier is at least ``tier``."""
        with self._lock:
            return self._debug >= tier

    def close(self) -> None:
        self._logger.removeHandler(self._handler)


def format_fields(fields: Dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in sorted(fields.items()))


def log_status_transition(
    probe: str,
    from_status: str,
    to_status: str,
    action: str,
    extra: Optional[dict] = None,
    level: int = logging.WARNING,
) -> None:
    """Log a forced/organic status change: probe, from_status, to_status, action plus extra fields."""
    extra = dict(extra or {})
    extra["probe"] = probe
    extra["from_status"] = from_status
    extra["to_status"] = to_status
    extra["action"] = action
    extra.setdefault("ts", round(time.time(), 3))
    logger.log(level, "status_transition " + format_fields(extra))
