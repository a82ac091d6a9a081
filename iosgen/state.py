"""Generation state: what observers of a package request get to see."""

from typing import Literal, TypedDict

Status = Literal["idle", "pending", "archived", "failed"]
ErrorKind = Literal["invalid_request", "transport", "service", "internal"]


class GenerationState(TypedDict):
    status: Status
    request_id: int | None  # Id of the prepared package config on the build service.
    archive_ref: str | None  # Set only when status == "archived".
    error: str | None  # Set only when status == "failed".
    error_kind: ErrorKind | None


def initial_state() -> GenerationState:
    """All-absent state a store starts in."""
    return {
        "status": "idle",
        "request_id": None,
        "archive_ref": None,
        "error": None,
        "error_kind": None,
    }
