"""Shared fixtures for the iosgen test suite."""

import httpx
import pytest
from unittest.mock import patch

from iosgen.client import ArtifactClient


@pytest.fixture
def manifest():
    """Typical manifest served from https://example.com/manifest.json."""
    return {
        "name": "Contoso Notes",
        "start_url": "/app/index.html",
        "scope": "https://example.com/app/",
        "icons": [
            {"src": "/icons/192.png", "sizes": "192x192", "type": "image/png"},
            {"src": "/icons/512.png", "sizes": "512x512", "type": "image/png"},
            {"src": "/icons/1024.png", "sizes": "1024x1024", "type": "image/png"},
            {"src": "/icons/any.svg", "sizes": "2048x2048", "type": "image/svg+xml"},
        ],
        "background_color": "#112233",
        "theme_color": "#445566",
        "manifest_url": "https://example.com/manifest.json",
    }


@pytest.fixture
def mock_config():
    """Patch the config singleton with test-friendly values."""
    test_config = {
        "api_url": "https://build.test/api",
        "artifacts_path": "/artifacts",
        "request_timeout": 5,
        "artifact_max_retries": 0,
        "retry_backoff_multiplier": 0,
        "retry_backoff_min": 0,
        "retry_backoff_max": 0,
    }
    with patch("iosgen.config._config", test_config):
        yield test_config


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_client(mock_config):
    """Build an ArtifactClient whose HTTP traffic goes to ``handler``."""

    def _make(handler):
        transport = RecordingTransport(handler)
        client = ArtifactClient(base_url="https://build.test/api", transport=transport)
        return client, transport

    return _make
