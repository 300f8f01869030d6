"""Log-level controller: read and update {log, debug, format} on the injected LogContext."""

import logging
from typing import Union

from pydantic import ValidationError

from zpages.core.errors import PayloadDecodeError
from zpages.core.logging_utils import LogContext
from zpages.status.schemas import LogLevel

logger = logging.getLogger(__name__)


class LogLevelController:
    def __init__(self, log_context: LogContext):
        self.log_context = log_context

    def current(self) -> LogLevel:
        return LogLevel(**self.log_context.snapshot())

    def decode(self, raw: Union[bytes, str]) -> LogLevel:
        """Parse a LogLevel payload. Missing fields take defaults; invalid JSON or types raise PayloadDecodeError."""
        try:
            return LogLevel.model_validate_json(raw)
        except ValidationError as e:
            raise PayloadDecodeError("invalid loglevel payload", details=str(e)) from e

    def update(self, requested: LogLevel) -> LogLevel:
        """Apply requested settings. Unknown levels become INFO, unknown formats text."""
        logger.debug(
            "SupportLogLevel: requested logLevel=%s debugLevel=%s logAs=%s",
            requested.log, requested.debug, requested.format,
        )
        level, debug, fmt = self.log_context.apply(requested.log, requested.debug, requested.format)
        if level.value != requested.log:
            logger.warning("SupportLogLevel: unknown level %r, using %s", requested.log, level.value)
        logger.info("SupportLogLevel: logLevel=%s debugLevel=%s logAs=%s", level.value, debug, fmt.value)
        return self.current()
