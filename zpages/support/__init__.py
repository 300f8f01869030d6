"""Support endpoints backing logic: forced states, log level, introspection."""

from zpages.support.controller import ShutdownToken, SupportController
from zpages.support.introspection import build_version, collect_env
from zpages.support.loglevel import LogLevelController

__all__ = [
    "ShutdownToken",
    "SupportController",
    "LogLevelController",
    "build_version",
    "collect_env",
]
