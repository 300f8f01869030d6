"""Error hierarchy for zpages handlers and the uniform Error body they render."""

from typing import Any, Dict, Optional

from zpages.status.schemas import ErrorBody

APP_NAME = "zpages"


class ZpagesError(Exception):
    """Base error. Carries the HTTP status and error code used for the Error body."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self, error_source: str = APP_NAME) -> Dict[str, Any]:
        """Uniform Error body: message, errorSource, errorCode (details when present)."""
        return ErrorBody(
            message=self.message,
            details=self.details or None,
            error_source=error_source,
            error_code=self.error_code,
        ).to_wire()


class SerializationError(ZpagesError):
    """Response payload could not be encoded as JSON."""

    status_code = 500
    error_code = "serialization_failed"


class PayloadReadError(ZpagesError):
    """Request body could not be read from the transport."""

    status_code = 204
    error_code = "payload_read_failed"


class PayloadDecodeError(ZpagesError):
    """Request body was read but is not a valid payload. The Error body goes out with the default 200."""

    status_code = 200
    error_code = "payload_decode_failed"
