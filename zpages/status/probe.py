"""Health and readiness sub-states: organic value plus operator overrides.

Each probe holds three flags behind its own lock:
- normal: organic measured value (True at startup)
- forced_on: operator forced the positive status
- forced_off: operator forced the negative status

forced_on and forced_off are never both True; setting one clears the other.
Public status precedence: forced_off > forced_on > normal.
"""

import logging
import threading
from typing import Callable, Dict, Optional

from zpages.core.state.enums import HealthStatus, ReadinessStatus

logger = logging.getLogger(__name__)

# on_transition(probe_name, from_status, to_status, action)
TransitionCallback = Callable[[str, str, str, str], None]

_FALLBACK_HTTP_STATUS = 503


class ProbeState:
    """One boolean-triple state machine guarded by an exclusive lock."""

    name = "probe"
    # (forced_off, forced_on, normal, not normal); set by subclasses
    STATUS_FORCED_OFF: str
    STATUS_FORCED_ON: str
    STATUS_NORMAL: str
    STATUS_NOT_NORMAL: str
    HTTP_STATUS: Dict[str, int] = {}

    def __init__(self, normal: bool = True, on_transition: Optional[TransitionCallback] = None):
        self._lock = threading.Lock()
        self._normal = normal
        self._forced_on = False
        self._forced_off = False
        self._on_transition = on_transition

    def _status_locked(self):
        if self._forced_off:
            return self.STATUS_FORCED_OFF
        if self._forced_on:
            return self.STATUS_FORCED_ON
        if self._normal:
            return self.STATUS_NORMAL
        return self.STATUS_NOT_NORMAL

    def observe(self):
        """Current public status."""
        with self._lock:
            return self._status_locked()

    def flags(self) -> Dict[str, bool]:
        with self._lock:
            return {"normal": self._normal, "forcedOn": self._forced_on, "forcedOff": self._forced_off}

    @classmethod
    def http_status_for(cls, status) -> int:
        return cls.HTTP_STATUS.get(status, _FALLBACK_HTTP_STATUS)

    def probe(self, log_flags: bool = False):
        """Observe status and its HTTP code under one lock hold. Returns (status, http_status)."""
        with self._lock:
            status = self._status_locked()
            if log_flags:
                logger.debug(
                    "%s probe: normal=%s forced_on=%s forced_off=%s status=%s",
                    self.name, self._normal, self._forced_on, self._forced_off, status.value,
                )
        return status, self.http_status_for(status)

    def _set(
        self,
        action: str,
        normal: Optional[bool] = None,
        forced_on: Optional[bool] = None,
        forced_off: Optional[bool] = None,
    ):
        with self._lock:
            before = self._status_locked()
            if normal is not None:
                self._normal = normal
            if forced_on is not None:
                self._forced_on = forced_on
            if forced_off is not None:
                self._forced_off = forced_off
            after = self._status_locked()
        if self._on_transition:
            try:
                self._on_transition(self.name, before.value, after.value, action)
            except Exception as e:
                logger.debug("on_transition callback error: %s", e)
        return after

    def force_off(self, action: str = "force_off"):
        return self._set(action, forced_on=False, forced_off=True)

    def force_on(self, action: str = "force_on"):
        return self._set(action, forced_on=True, forced_off=False)

    def clear_forced(self, action: str = "clear_forced"):
        return self._set(action, forced_on=False, forced_off=False)

    def mark(self, normal: bool, action: str = "mark"):
        """Record the organic value. Forced flags are left as they are."""
        return self._set(action, normal=bool(normal))


class HealthProbe(ProbeState):
    """Liveness sub-state rendered by /healthz."""

    name = "health"
    STATUS_FORCED_OFF = HealthStatus.FAILED_FORCED
    STATUS_FORCED_ON = HealthStatus.OK_FORCED
    STATUS_NORMAL = HealthStatus.OK
    STATUS_NOT_NORMAL = HealthStatus.FAILED
    HTTP_STATUS = {
        HealthStatus.FAILED_FORCED: 501,
        HealthStatus.OK_FORCED: 202,
        HealthStatus.OK: 200,
    }

    def set_unhealthy(self) -> HealthStatus:
        return self.force_off("set_unhealthy")

    def set_healthy(self) -> HealthStatus:
        return self.clear_forced("set_healthy")

    def force_healthy(self) -> HealthStatus:
        return self.force_on("force_healthy")

    def mark_healthy(self) -> HealthStatus:
        return self.mark(True, "mark_healthy")

    def mark_failed(self) -> HealthStatus:
        return self.mark(False, "mark_failed")


class ReadinessProbe(ProbeState):
    """Traffic readiness sub-state rendered by /readyz."""

    name = "readiness"
    STATUS_FORCED_OFF = ReadinessStatus.NOT_READY_FORCED
    STATUS_FORCED_ON = ReadinessStatus.READY_FORCED
    STATUS_NORMAL = ReadinessStatus.READY
    STATUS_NOT_NORMAL = ReadinessStatus.NOT_READY
    HTTP_STATUS = {
        ReadinessStatus.NOT_READY_FORCED: 501,
        ReadinessStatus.READY_FORCED: 203,
        ReadinessStatus.READY: 200,
    }

    def set_not_ready_forced(self) -> ReadinessStatus:
        return self.force_off("set_not_ready_forced")

    def unset_not_ready_forced(self) -> ReadinessStatus:
        return self.clear_forced("unset_not_ready_forced")

    def force_ready(self) -> ReadinessStatus:
        return self.force_on("force_ready")

    def set_not_ready(self) -> ReadinessStatus:
        """Organic not-ready; also drops any override."""
        return self._set("set_not_ready", normal=False, forced_on=False, forced_off=False)

    def unset_not_ready(self) -> ReadinessStatus:
        """Organic ready; also drops any override."""
        return self._set("unset_not_ready", normal=True, forced_on=False, forced_off=False)
