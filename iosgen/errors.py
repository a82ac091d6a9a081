"""Failure kinds for a generation request.

None of these escape GenerationRequestAction.request_generation; they are
converted into the ``error`` / ``error_kind`` fields of the state.
"""

GENERIC_ERROR = "Package generation failed"
INVALID_REQUEST_MESSAGE = "Request id is not defined"


class GenerationError(Exception):
    """Base class. ``kind`` ends up in GenerationState.error_kind."""

    kind = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(GenerationError):
    """Request id missing or non-positive. Detected before any network call."""

    kind = "invalid_request"

    def __init__(self, message: str = INVALID_REQUEST_MESSAGE):
        super().__init__(message)


class TransportFailure(GenerationError):
    """The build service could not be reached."""

    kind = "transport"


class ServiceFailure(GenerationError):
    """The build service answered with an error status or an unusable body."""

    kind = "service"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
