"""Shared HTTP helpers for talking to the build service."""

import sys

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception

from iosgen.errors import GENERIC_ERROR


def error_message_from_response(response: httpx.Response) -> str:
    """Pick the most specific error message a failed response offers.

    Precedence: JSON ``error`` string, raw body text, HTTP reason phrase,
    then GENERIC_ERROR.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error.strip():
            return error

    text = response.text.strip()
    if text:
        return text

    if response.reason_phrase:
        return response.reason_phrase

    return GENERIC_ERROR


def _is_transient(exc: BaseException) -> bool:
    """Return True if the exception is a transient HTTP/network error worth retrying."""
    if isinstance(exc, httpx.TimeoutException):
        return True
    if isinstance(exc, httpx.ConnectError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in (429, 500, 502, 503)
    return False


async def get_with_retry(
    client: httpx.AsyncClient, url: str, params: dict, max_retries: int | None = None
) -> httpx.Response:
    """GET ``url`` and raise_for_status, retrying transient failures.

    Retries on HTTP 429/500/502/503, connection errors, and timeouts.
    artifact_max_retries defaults to 0, i.e. exactly one call.
    """
    from iosgen.config import get_config

    config = get_config()
    retries = config.get("artifact_max_retries", 0) if max_retries is None else max_retries

    @retry(
        stop=stop_after_attempt(retries + 1),  # +1 because first attempt counts
        wait=wait_exponential(
            multiplier=config.get("retry_backoff_multiplier", 1),
            min=config.get("retry_backoff_min", 2),
            max=config.get("retry_backoff_max", 16),
        ),
        retry=retry_if_exception(_is_transient),
        reraise=True,
        before_sleep=lambda state: print(
            f"[iosgen] Transient error: {state.outcome.exception()!r}. "
            f"Retrying in {state.next_action.sleep:.0f}s "
            f"(attempt {state.attempt_number}/{retries})...",
            file=sys.stderr,
        ),
    )
    async def _get():
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response

    return await _get()
