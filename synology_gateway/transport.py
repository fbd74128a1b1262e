"""Raw HTTP transport for the Synology DSM Web API.

Knows how to put a request on the wire (``/webapi/<cgi>.cgi``) and turn
the JSON body into a :data:`~synology_gateway.responses.SynologyResponse`.
It has no notion of sessions: the ``sid`` is just another field, sent as
``_sid``.  Non-2xx statuses raise :class:`httpx.HTTPStatusError` so the
session layer can classify them as connection failures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from synology_gateway.constants import DEFAULT_REQUEST_TIMEOUT
from synology_gateway.responses import SynologyResponse, parse_synology_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormFile:
    """A file to upload as part of a multipart POST."""

    content: bytes
    filename: str
    content_type: str = "application/octet-stream"


def _headers(referer: str | None) -> dict[str, str]:
    return {"Referer": referer} if referer else {}


def _marshal(request: dict[str, Any]) -> dict[str, Any]:
    """Drop unset fields and rename ``sid`` to the wire name ``_sid``."""
    fields: dict[str, Any] = {}
    for key, value in request.items():
        if value is None or isinstance(value, FormFile):
            continue
        fields["_sid" if key == "sid" else key] = value
    return fields


class SynologyTransport:
    """Thin async wrapper around ``httpx.AsyncClient`` for DSM CGI endpoints.

    Args:
        timeout: Default per-request timeout in seconds.
        verify: Whether to verify TLS certificates.
        client: Optional pre-built ``httpx.AsyncClient`` (mainly for tests).
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        verify: bool = False,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(
            timeout=timeout,
            verify=verify,  # Synology 자체 서명 인증서 허용
        )

    @staticmethod
    def cgi_url(base_url: str, cgi: str) -> str:
        return f"{base_url.rstrip('/')}/webapi/{cgi}.cgi"

    async def get(
        self,
        base_url: str,
        cgi: str,
        request: dict[str, Any],
        timeout: float | None = None,
        referer: str | None = None,
    ) -> SynologyResponse:
        """Send a GET with *request* encoded in the query string."""
        response = await self._client.get(
            self.cgi_url(base_url, cgi),
            params=_marshal(request),
            headers=_headers(referer),
            timeout=timeout or self._timeout,
        )
        response.raise_for_status()
        return parse_synology_response(response.json())

    async def post(
        self,
        base_url: str,
        cgi: str,
        request: dict[str, Any],
        timeout: float | None = None,
        referer: str | None = None,
    ) -> SynologyResponse:
        """Send a POST with *request* as form fields.

        :class:`FormFile` values go out as multipart parts after the plain
        fields, which DSM requires for uploads.
        """
        files = {
            key: (value.filename, value.content, value.content_type)
            for key, value in request.items()
            if isinstance(value, FormFile)
        }
        response = await self._client.post(
            self.cgi_url(base_url, cgi),
            data=_marshal(request),
            files=files or None,
            headers=_headers(referer),
            timeout=timeout or self._timeout,
        )
        response.raise_for_status()
        return parse_synology_response(response.json())

    async def close(self) -> None:
        """Dispose the underlying ``httpx.AsyncClient``."""
        await self._client.aclose()
