"""Artifact lookup against the remote build service.

Wire contract:
    GET <api_url><artifacts_path>?ids=<request_id>
    2xx -> {"archive": "<archive reference>"}
    otherwise -> {"error": "..."}, a raw body, or just a status line
"""

import httpx

from iosgen.config import get_api_url, get_config
from iosgen.errors import GENERIC_ERROR, ServiceFailure, TransportFailure
from iosgen.utils.http import error_message_from_response, get_with_retry


class ArtifactClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = get_config()
        self.base_url = (base_url or get_api_url()).rstrip("/")
        self.artifacts_path = config.get("artifacts_path", "/artifacts")
        self.timeout = timeout if timeout is not None else config.get("request_timeout", 30)
        self._transport = transport

    @property
    def artifacts_url(self) -> str:
        return f"{self.base_url}{self.artifacts_path}"

    async def fetch_archive(self, request_id: int) -> str:
        """Look up the archive reference for a prepared package.

        Raises TransportFailure when the service is unreachable and
        ServiceFailure for error statuses or bodies without an archive.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await get_with_retry(client, self.artifacts_url, {"ids": request_id})
        except httpx.HTTPStatusError as exc:
            raise ServiceFailure(
                error_message_from_response(exc.response),
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportFailure(str(exc) or GENERIC_ERROR) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        archive = body.get("archive") if isinstance(body, dict) else None
        if not isinstance(archive, str) or not archive:
            raise ServiceFailure(
                error_message_from_response(response), status_code=response.status_code
            )
        return archive
