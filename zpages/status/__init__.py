"""Status Registry and its health/readiness probes."""

from zpages.status.probe import HealthProbe, ProbeState, ReadinessProbe
from zpages.status.registry import StatusRegistry
from zpages.status.schemas import ServiceStatus

__all__ = ["ProbeState", "HealthProbe", "ReadinessProbe", "StatusRegistry", "ServiceStatus"]
