"""Status Registry: service identity plus independent health and readiness probes."""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from zpages.core.logging_utils import log_status_transition
from zpages.core.state.enums import HealthStatus, ReadinessStatus, ServiceType
from zpages.status.probe import HealthProbe, ReadinessProbe
from zpages.status.schemas import HealthStatusBody, ReadinessStatusBody, ServiceStatus

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StatusRegistry:
    """Holds one service's status for the lifetime of the process.

    Health and readiness each have their own lock, so probe reads and support
    writes on one never wait for the other. ``updated`` is refreshed on every
    mutation and has its own lock.
    """

    def __init__(
        self,
        name: str,
        uri: str,
        service_type: ServiceType = ServiceType.APPLICATION,
        guid: Optional[str] = None,
        upstream_services: Optional[List[ServiceStatus]] = None,
        log_fields: Optional[Dict[str, Any]] = None,
    ):
        self.name = name
        self.uri = uri
        self.service_type = ServiceType(service_type)
        self.guid = guid or str(uuid.uuid4())
        self.upstream_services: List[ServiceStatus] = list(upstream_services or [])
        self._log_fields = dict(log_fields or {})

        self._updated_lock = threading.Lock()
        self._updated = _now()

        self.health = HealthProbe(normal=True, on_transition=self._on_transition)
        self.readiness = ReadinessProbe(normal=True, on_transition=self._on_transition)

    @property
    def updated(self) -> datetime:
        with self._updated_lock:
            return self._updated

    def log_fields(self) -> Dict[str, Any]:
        """Identity fields attached to every zpages log line."""
        fields = {"instance": self.uri, "guid": self.guid}
        fields.update(self._log_fields)
        return fields

    def _on_transition(self, probe: str, from_status: str, to_status: str, action: str) -> None:
        with self._updated_lock:
            self._updated = _now()
        log_status_transition(
            probe,
            from_status,
            to_status,
            action,
            extra=self.log_fields(),
            level=logging.INFO if from_status == to_status else logging.WARNING,
        )

    def snapshot(
        self,
        health: Optional[HealthStatus] = None,
        readiness: Optional[ReadinessStatus] = None,
    ) -> ServiceStatus:
        """Consistent-per-probe view: each probe is read under its own lock.

        A probe handler passes the status it already observed so the body matches its HTTP code.
        """
        if health is None:
            health = self.health.observe()
        if readiness is None:
            readiness = self.readiness.observe()
        return ServiceStatus(
            guid=self.guid,
            name=self.name,
            type=self.service_type,
            health=HealthStatusBody(status=health),
            readiness=ReadinessStatusBody(status=readiness),
            updated=self.updated,
            uri=self.uri,
            upstream_services=list(self.upstream_services) or None,
        )
