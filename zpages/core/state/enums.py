"""Probe state enums: health, readiness, service type, log level, log format."""

import enum


class HealthStatus(str, enum.Enum):
    """Public health value rendered by /healthz."""

    OK = "ok"
    FAILED = "failed"
    UNKNOWN = "unknown"
    OK_FORCED = "ok-forced"
    FAILED_FORCED = "failed-forced"


class ReadinessStatus(str, enum.Enum):
    """Public readiness value rendered by /readyz."""

    READY = "ready"
    NOT_READY = "not-ready"
    UNKNOWN = "unknown"
    READY_FORCED = "ready-forced"
    NOT_READY_FORCED = "not-ready-forced"


class ServiceType(str, enum.Enum):
    """Kind of service reporting its status."""

    INFRASTRUCTURE = "infrastructure"
    PLATFORM = "platform"
    APPLICATION = "application"
    EXTERNAL = "external"


class LogLevelName(str, enum.Enum):
    """Allow-list of log levels accepted by /support/loglevel and LOGLEVEL."""

    PANIC = "PANIC"
    FATAL = "FATAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"
    TRACE = "TRACE"


class LogFormat(str, enum.Enum):
    """Log output format (LOGAS)."""

    TEXT = "text"
    JSON = "json"
