"""GenerationStateStore owns the state of one package generation flow.

Each begin_request hands out a new token. Completions that carry an older
token are stale and dropped, so the newest request's outcome is the one kept.
Completions without a token always apply.
"""

from iosgen.errors import GenerationError
from iosgen.state import GenerationState, initial_state
from iosgen.utils.validator import validate_request_id


class GenerationStateStore:
    def __init__(self):
        self._state: GenerationState = initial_state()
        self._token = 0

    @property
    def token(self) -> int:
        """Token of the most recent begin_request (0 before any)."""
        return self._token

    def _is_stale(self, token: int | None) -> bool:
        return token is not None and token != self._token

    def begin_request(self, request_id: int) -> int:
        """Enter the pending status for ``request_id`` and return its token.

        Raises InvalidRequest (state untouched) if the id is not a positive int.
        """
        validate_request_id(request_id)
        self._token += 1
        self._state = {
            "status": "pending",
            "request_id": request_id,
            "archive_ref": None,
            "error": None,
            "error_kind": None,
        }
        return self._token

    def complete_with_archive(self, archive_ref: str, token: int | None = None) -> bool:
        """Record a successful build. Returns False if the token is stale."""
        if self._is_stale(token):
            return False
        self._state["status"] = "archived"
        self._state["archive_ref"] = archive_ref
        self._state["error"] = None
        self._state["error_kind"] = None
        return True

    def complete_with_error(
        self, message: str, kind: str = GenerationError.kind, token: int | None = None
    ) -> bool:
        """Record a failure. Returns False if the token is stale."""
        if self._is_stale(token):
            return False
        self._state["status"] = "failed"
        self._state["archive_ref"] = None
        self._state["error"] = message
        self._state["error_kind"] = kind
        return True

    def snapshot(self) -> GenerationState:
        # All values are immutable scalars, a shallow copy is enough.
        return dict(self._state)
