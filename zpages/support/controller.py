"""Support controller: operator actions that force degraded states or end the process.

quiesce -> readiness forced off
resume  -> readiness override cleared
fail    -> health forced off
quit    -> readiness forced off, shutdown requested, health forced off
restart -> readiness forced off then cleared (state unchanged, both steps logged)
crash   -> snapshot returned, then the process is terminated by terminate()
"""

import logging
import os
import threading
from typing import Callable, Optional

from zpages.core.logging_utils import LogContext, format_fields
from zpages.status.registry import StatusRegistry
from zpages.status.schemas import ServiceStatus

logger = logging.getLogger(__name__)

CRASH_EXIT_CODE = 1


class ShutdownToken:
    """One-shot shutdown request. The supervisor waits on it and decides how to stop."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[str] = None

    def request(self, reason: str) -> bool:
        """Request shutdown. Returns True for the first request, False if already requested."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
        return True

    @property
    def requested(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        with self._lock:
            return self._reason

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)


class SupportController:
    """Mutating support operations. Every action returns the full status snapshot."""

    def __init__(
        self,
        registry: StatusRegistry,
        log_context: LogContext,
        shutdown: Optional[ShutdownToken] = None,
        exit_func: Callable[[int], None] = os._exit,
    ):
        self.registry = registry
        self.log_context = log_context
        self.shutdown = shutdown or ShutdownToken()
        self._exit = exit_func

    def _readiness_fields(self) -> str:
        fields = self.registry.log_fields()
        fields.update({("readiness_" + k): v for k, v in self.registry.readiness.flags().items()})
        return format_fields(fields)

    def _health_fields(self) -> str:
        fields = self.registry.log_fields()
        fields.update({("health_" + k): v for k, v in self.registry.health.flags().items()})
        return format_fields(fields)

    def quiesce(self) -> ServiceStatus:
        self.registry.readiness.set_not_ready_forced()
        logger.warning("SupportQuiesce: set forced not ready %s", self._readiness_fields())
        return self.registry.snapshot()

    def resume(self) -> ServiceStatus:
        self.registry.readiness.unset_not_ready_forced()
        logger.warning("SupportResume: unset forced not ready %s", self._readiness_fields())
        return self.registry.snapshot()

    def fail(self) -> ServiceStatus:
        self.registry.health.set_unhealthy()
        logger.warning("SupportFail: set forced unhealthy %s", self._health_fields())
        return self.registry.snapshot()

    def quit(self) -> ServiceStatus:
        self.registry.readiness.set_not_ready_forced()
        if not self.shutdown.request("quit"):
            logger.info("SupportQuit: shutdown already requested (reason=%s)", self.shutdown.reason)
        self.registry.health.set_unhealthy()
        logger.warning(
            "SupportQuit: set forced not ready and forced unhealthy %s",
            self._health_fields(),
        )
        return self.registry.snapshot()

    def restart(self) -> ServiceStatus:
        self.registry.readiness.set_not_ready_forced()
        logger.warning("SupportRestart: restarting... %s", self._readiness_fields())
        self.registry.readiness.unset_not_ready_forced()
        logger.warning("SupportRestart: restarted %s", self._readiness_fields())
        return self.registry.snapshot()

    def crash(self) -> ServiceStatus:
        """Snapshot for the crash response body. Call terminate() once the body is written."""
        logger.warning("SupportCrash: crash requested %s", format_fields(self.registry.log_fields()))
        return self.registry.snapshot()

    def terminate(self) -> None:
        logger.critical("SupportCrash: crashing... %s", format_fields(self.registry.log_fields()))
        for handler in self.log_context.logger.handlers:
            handler.flush()
        self._exit(CRASH_EXIT_CODE)
