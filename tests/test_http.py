"""Tests for iosgen.utils.http: error_message_from_response, get_with_retry."""

import asyncio
from unittest.mock import patch

import httpx
import pytest

from iosgen.errors import GENERIC_ERROR
from iosgen.utils.http import error_message_from_response, get_with_retry

_NO_WAIT = {"retry_backoff_multiplier": 0, "retry_backoff_min": 0, "retry_backoff_max": 0}


# --- error_message_from_response ---

class TestErrorMessageFromResponse:
    def test_structured_error_field(self):
        response = httpx.Response(500, json={"error": "build failed", "detail": "x"})
        assert error_message_from_response(response) == "build failed"

    def test_blank_error_field_falls_back_to_body(self):
        response = httpx.Response(500, json={"error": ""})
        assert error_message_from_response(response) == response.text.strip()

    def test_raw_body(self):
        response = httpx.Response(400, text="  bad manifest  ")
        assert error_message_from_response(response) == "bad manifest"

    def test_reason_phrase(self):
        assert error_message_from_response(httpx.Response(503)) == "Service Unavailable"

    def test_generic_fallback(self):
        assert error_message_from_response(httpx.Response(599)) == GENERIC_ERROR


# --- get_with_retry ---

def _run(handler, **kwargs):
    calls = []

    def _counting(request):
        calls.append(request)
        return handler(request, len(calls))

    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_counting)) as client:
            return await get_with_retry(client, "https://build.test/artifacts", {"ids": 1}, **kwargs)

    return asyncio.run(_go()), calls


class TestGetWithRetry:
    @patch("iosgen.config._config", {"artifact_max_retries": 0, **_NO_WAIT})
    def test_single_call_by_default(self):
        def handler(request, n):
            return httpx.Response(503)

        with pytest.raises(httpx.HTTPStatusError):
            _run(handler)

    @patch("iosgen.config._config", {"artifact_max_retries": 2, **_NO_WAIT})
    def test_retries_on_503_then_succeeds(self):
        def handler(request, n):
            if n < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"archive": "a"})

        response, calls = _run(handler)

        assert response.json() == {"archive": "a"}
        assert len(calls) == 3

    @patch("iosgen.config._config", {"artifact_max_retries": 2, **_NO_WAIT})
    def test_retries_on_connect_error(self):
        def handler(request, n):
            if n == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"archive": "a"})

        response, calls = _run(handler)

        assert response.status_code == 200
        assert len(calls) == 2

    @patch("iosgen.config._config", {"artifact_max_retries": 3, **_NO_WAIT})
    def test_does_not_retry_on_404(self):
        calls = []

        def handler(request, n):
            calls.append(n)
            return httpx.Response(404)

        with pytest.raises(httpx.HTTPStatusError):
            _run(handler)

        assert calls == [1]

    @patch("iosgen.config._config", {"artifact_max_retries": 1, **_NO_WAIT})
    def test_raises_after_max_retries(self):
        calls = []

        def handler(request, n):
            calls.append(n)
            return httpx.Response(500)

        with pytest.raises(httpx.HTTPStatusError):
            _run(handler)

        assert calls == [1, 2]  # 1 initial + 1 retry
