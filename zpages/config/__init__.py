"""Config loading: YAML file merged over packaged defaults, env overrides for logging."""

from zpages.config.settings import (
    get_logging_config,
    get_server_config,
    get_service_config,
    get_version_config,
    merged_config,
    read_config,
)

__all__ = [
    "read_config",
    "merged_config",
    "get_server_config",
    "get_service_config",
    "get_version_config",
    "get_logging_config",
]
