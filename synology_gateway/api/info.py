"""``SYNO.API.Info`` -- unauthenticated API discovery."""

from __future__ import annotations

from synology_gateway.responses import SynologyResponse, SynologySuccess
from synology_gateway.transport import SynologyTransport

CGI_NAME = "query"
API_NAME = "SYNO.API.Info"


async def query(
    transport: SynologyTransport,
    base_url: str,
    apis: list[str] | str = "ALL",
    timeout: float | None = None,
    referer: str | None = None,
) -> SynologyResponse:
    """Ask the NAS which APIs it exposes and in which versions."""
    return await transport.get(
        base_url,
        CGI_NAME,
        {
            "api": API_NAME,
            "version": 1,
            "method": "query",
            "query": apis if isinstance(apis, str) else ",".join(apis),
        },
        timeout=timeout,
        referer=referer,
    )


def max_version(response: SynologyResponse, api: str) -> int | None:
    """Return the advertised ``maxVersion`` of *api*, if any."""
    if not isinstance(response, SynologySuccess):
        return None
    entry = response.data.get(api)
    if not isinstance(entry, dict):
        return None
    try:
        return int(entry["maxVersion"])
    except (KeyError, TypeError, ValueError):
        return None
