"""LangGraph StateGraph driving one package generation request.

States as seen through the store: idle -> pending -> archived | failed.
An invalid request id goes straight to failed without a network call.
"""

import asyncio
import sys
from typing import Any, TypedDict

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph

from iosgen.client import ArtifactClient
from iosgen.errors import GENERIC_ERROR, GenerationError, InvalidRequest
from iosgen.state import GenerationState
from iosgen.store import GenerationStateStore
from iosgen.utils.validator import is_valid_request_id


class RequestFlowState(TypedDict):
    request_id: Any  # Unvalidated caller input.
    token: int | None  # Issued by begin_request; compared when committing.
    archive_ref: str | None
    error: str | None
    error_kind: str | None
    committed: bool  # False when the outcome was discarded as stale.


def _route_request(state: RequestFlowState) -> str:
    """Entry edge: only valid ids reach the build service."""
    return "begin" if is_valid_request_id(state["request_id"]) else "reject"


def _route_after_fetch(state: RequestFlowState) -> str:
    return "archive" if state["archive_ref"] else "fail"


class GenerationRequestAction:
    """Runs requests against the build service and records outcomes in ``store``.

    Each instance owns its store, so independent flows (e.g. several package
    targets) never share state.
    """

    def __init__(
        self,
        store: GenerationStateStore | None = None,
        client: ArtifactClient | None = None,
    ):
        self.store = store if store is not None else GenerationStateStore()
        self.client = client if client is not None else ArtifactClient()
        self._flow = self._build_flow()

    def _build_flow(self):
        workflow = StateGraph(RequestFlowState)

        workflow.add_node("reject", self._reject)
        workflow.add_node("begin", self._begin)
        workflow.add_node("fetch", self._fetch)
        workflow.add_node("archive", self._archive)
        workflow.add_node("fail", self._fail)

        workflow.add_conditional_edges(
            START,
            _route_request,
            {"begin": "begin", "reject": "reject"},
        )
        workflow.add_edge("begin", "fetch")
        workflow.add_conditional_edges(
            "fetch",
            _route_after_fetch,
            {"archive": "archive", "fail": "fail"},
        )
        workflow.add_edge("reject", END)
        workflow.add_edge("archive", END)
        workflow.add_edge("fail", END)

        return workflow.compile()

    # --- Nodes ---

    def _reject(self, state: RequestFlowState) -> dict:
        error = InvalidRequest()
        committed = False
        # A pending request owns the store; its outcome must not be replaced.
        if self.store.snapshot()["status"] != "pending":
            committed = self.store.complete_with_error(
                error.message, kind=error.kind, token=self.store.token
            )
        return {"error": error.message, "error_kind": error.kind, "committed": committed}

    def _begin(self, state: RequestFlowState, config: RunnableConfig) -> dict:
        # Pending is visible to observers before the network call below.
        token = self.store.begin_request(state["request_id"])
        config["configurable"]["ticket"]["token"] = token
        return {"token": token}

    async def _fetch(self, state: RequestFlowState) -> dict:
        try:
            archive_ref = await self.client.fetch_archive(state["request_id"])
        except GenerationError as exc:
            return {"error": exc.message, "error_kind": exc.kind}
        return {"archive_ref": archive_ref}

    def _archive(self, state: RequestFlowState) -> dict:
        committed = self.store.complete_with_archive(state["archive_ref"], token=state["token"])
        if not committed:
            _warn_stale(state)
        return {"committed": committed}

    def _fail(self, state: RequestFlowState) -> dict:
        committed = self.store.complete_with_error(
            state["error"] or GENERIC_ERROR,
            kind=state["error_kind"] or GenerationError.kind,
            token=state["token"],
        )
        if not committed:
            _warn_stale(state)
        return {"committed": committed}

    # --- Public entry points ---

    async def request_generation(self, request_id: int) -> GenerationState:
        """Fetch the archive for ``request_id`` and return the resulting state.

        Never raises: invalid ids, transport errors and service errors all
        end up in the returned state's ``error`` field. An invalid id that
        arrives while another request is pending leaves the store alone and
        only the returned state reports the rejection.
        """
        initial: RequestFlowState = {
            "request_id": request_id,
            "token": None,
            "archive_ref": None,
            "error": None,
            "error_kind": None,
            "committed": False,
        }
        start_token = self.store.token
        ticket = {"token": None}
        try:
            result = await self._flow.ainvoke(initial, config={"configurable": {"ticket": ticket}})
        except Exception as exc:
            print(
                f"[iosgen] Unexpected failure for request {request_id!r}: {exc!r}",
                file=sys.stderr,
            )
            # Before begin ran, only commit if nobody else has started since.
            token = ticket["token"] if ticket["token"] is not None else start_token
            committed = self.store.complete_with_error(
                GENERIC_ERROR, kind=GenerationError.kind, token=token
            )
            if not committed:
                _warn_stale({"request_id": request_id, "token": token})
            return self.store.snapshot()

        if result["error_kind"] == InvalidRequest.kind and not result["committed"]:
            return {
                "status": "failed",
                "request_id": None,
                "archive_ref": None,
                "error": result["error"],
                "error_kind": result["error_kind"],
            }
        return self.store.snapshot()

    def generate(self, request_id: int) -> GenerationState:
        """Blocking wrapper around request_generation for scripts and the CLI."""
        return asyncio.run(self.request_generation(request_id))


def _warn_stale(state: RequestFlowState) -> None:
    print(
        f"[iosgen] Discarding stale result for request {state['request_id']} "
        f"(token {state['token']}): a newer request has started.",
        file=sys.stderr,
    )
