"""HTTP client for the Voyager verification service.

Thin wrapper around httpx.Client that knows the service's path templates,
applies the per-request timeout and API key header from settings, and turns
network-layer failures into TransportError. Status-code handling belongs to
the services, each of which has its own decision table.

Usage:
    from voyager_verifier.infrastructure.api_client import ApiEndpoints, VoyagerApiClient

    with VoyagerApiClient("https://sepolia-api.voyager.online/beta") as client:
        response = client.get(ApiEndpoints.GET_JOB_STATUS, job_id)
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from voyager_verifier.config import get_settings
from voyager_verifier.domain.exceptions import ProtocolError, TransportError
from voyager_verifier.logging_config import get_logger

if TYPE_CHECKING:
    from voyager_verifier.config import Settings

logger = get_logger(__name__)


class ApiEndpoints(enum.StrEnum):
    """Path templates, relative to the internal or public base URL.

    GetClass still lives on the internal API; the job endpoints are public.
    """

    GET_CLASS = "/api/class/{class_hash}"
    GET_JOB_STATUS = "/class-verify/job/{job_id}"
    VERIFY_CLASS = "/class-verify/{class_hash}"

    def to_api_path(self, param: str) -> str:
        """Substitute the single path parameter of this endpoint."""
        encoded = quote(param, safe="")
        return self.value.format(class_hash=encoded, job_id=encoded)


class VoyagerApiClient:
    """Blocking client bound to one base URL."""

    def __init__(
        self,
        base_url: str,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Create the underlying httpx.Client.

        Args:
            base_url: Internal or public API root, as returned by get_network_api.
            settings: Overrides the cached settings (timeout, API key).
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests.
        """
        settings = settings or get_settings()
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            timeout=settings.http_timeout_seconds,
            headers=settings.api_headers,
            transport=transport,
        )

    def __enter__(self) -> VoyagerApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def url_for(self, endpoint: ApiEndpoints, param: str) -> str:
        return f"{self.base_url}{endpoint.to_api_path(param)}"

    def get(self, endpoint: ApiEndpoints, param: str) -> httpx.Response:
        """Issue a single GET. No retries at this layer."""
        return self._send("GET", self.url_for(endpoint, param))

    def post_multipart(
        self,
        endpoint: ApiEndpoints,
        param: str,
        fields: list[tuple[str, str]],
    ) -> httpx.Response:
        """POST a multipart/form-data body made only of text fields.

        Values are sent as raw UTF-8 text parts, without percent-encoding
        and without a filename, so the body is multipart even when it holds
        no source files.
        """
        parts = [(name, (None, value.encode("utf-8"))) for name, value in fields]
        return self._send("POST", self.url_for(endpoint, param), files=parts)

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("api.request_failed", method=method, url=url, error=str(exc))
            raise TransportError(url, str(exc)) from exc

        logger.debug("api.response", method=method, url=url, status=response.status_code)
        return response


def parse_json(response: httpx.Response) -> Any:
    """Decode a response body as JSON.

    Raises:
        ProtocolError: If the body is not valid JSON.
    """
    try:
        return response.json()
    except ValueError as exc:
        raise ProtocolError(
            f"Unparseable response body from {response.request.url} "
            f"(status {response.status_code}): {response.text[:200]}"
        ) from exc
