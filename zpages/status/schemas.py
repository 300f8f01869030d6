"""Wire schemas for zpages responses (camelCase JSON keys)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from zpages.core.state.enums import HealthStatus, ReadinessStatus, ServiceType


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with aliased keys; unset optional fields are dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HealthStatusBody(_Wire):
    status: HealthStatus


class ReadinessStatusBody(_Wire):
    status: ReadinessStatus


class ServiceStatus(_Wire):
    """Status of the service and, optionally, its upstream services."""

    guid: str
    name: str
    type: ServiceType
    health: HealthStatusBody = Field(alias="healthStatus")
    readiness: ReadinessStatusBody = Field(alias="readinessStatus")
    updated: datetime
    uri: str
    upstream_services: Optional[List[ServiceStatus]] = Field(default=None, alias="upstreamServices")


class Version(_Wire):
    module: str
    version: str
    dependencies: Optional[List[Version]] = None


class Env(_Wire):
    name: str
    value: str


class LogLevel(_Wire):
    log: str = "INFO"  # [PANIC, FATAL, ERROR, WARNING, INFO, DEBUG, TRACE]
    debug: int = 0
    format: str = "text"  # [text, json]


class ErrorBody(_Wire):
    message: str
    details: Optional[str] = None
    recommended_actions: Optional[List[str]] = Field(default=None, alias="recommendedActions")
    nested_errors: Optional[str] = Field(default=None, alias="nestedErrors")
    error_source: str = Field(alias="errorSource")
    error_code: str = Field(alias="errorCode")
    data: Optional[str] = None


class Info(_Wire):
    version: Version
    status: ServiceStatus
    env: List[Env]
    log_level: LogLevel = Field(alias="logLevel")


ServiceStatus.model_rebuild()
Version.model_rebuild()
