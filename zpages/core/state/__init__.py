"""Status enums shared by probes, schemas and the log-level controller."""

from .enums import (
    HealthStatus,
    LogFormat,
    LogLevelName,
    ReadinessStatus,
    ServiceType,
)

__all__ = [
    "HealthStatus",
    "ReadinessStatus",
    "ServiceType",
    "LogLevelName",
    "LogFormat",
]
