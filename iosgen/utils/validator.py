"""Input validation: checks the request id before anything touches the build service."""

from iosgen.errors import InvalidRequest


def is_valid_request_id(request_id) -> bool:
    """True for positive ints. bool is rejected even though it subclasses int."""
    return isinstance(request_id, int) and not isinstance(request_id, bool) and request_id > 0


def validate_request_id(request_id) -> int:
    """Validate that the request id identifies a prepared package configuration.

    Returns the id on success.
    Raises InvalidRequest for None, zero, negative or non-integer ids.
    """
    if not is_valid_request_id(request_id):
        raise InvalidRequest()
    return request_id
