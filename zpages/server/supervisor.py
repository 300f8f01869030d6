"""Process supervisor: runs uvicorn and stops it when the shutdown token is set.

/support/quit only requests shutdown; the supervisor owns the decision to stop.
SIGTERM/SIGINT are handled by uvicorn itself.
"""

import logging
import threading
from typing import Any, Optional

import uvicorn

from zpages.support.controller import ShutdownToken

logger = logging.getLogger(__name__)


class Supervisor:
    """Owns the uvicorn server and the shutdown watcher thread."""

    def __init__(
        self,
        app: Any,
        host: str,
        port: int,
        shutdown: ShutdownToken,
        server: Optional[Any] = None,
    ):
        self.shutdown = shutdown
        if server is None:
            config = uvicorn.Config(app, host=host, port=int(port), log_level="info")
            server = uvicorn.Server(config)
        self._server = server
        self._watcher: Optional[threading.Thread] = None

    def _watch(self) -> None:
        self.shutdown.wait()
        if self._server.should_exit:
            return
        logger.warning("shutdown requested (reason=%s); stopping server", self.shutdown.reason)
        self._server.should_exit = True

    def start_watcher(self) -> threading.Thread:
        if self._watcher is None or not self._watcher.is_alive():
            self._watcher = threading.Thread(target=self._watch, name="zpages-shutdown-watcher", daemon=True)
            self._watcher.start()
        return self._watcher

    def run(self) -> None:
        """Serve until the token is set or uvicorn exits on a signal."""
        self.start_watcher()
        try:
            self._server.run()
        finally:
            # release the watcher when uvicorn stopped on its own
            if self.shutdown.request("server_exit"):
                logger.info("server exited; shutdown token released")
            logger.info("zpages server stopped (reason=%s)", self.shutdown.reason)
