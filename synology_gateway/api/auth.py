"""``SYNO.API.Auth`` -- login and logout."""

from __future__ import annotations

from synology_gateway.constants import SessionName
from synology_gateway.responses import SynologyResponse
from synology_gateway.transport import SynologyTransport

CGI_NAME = "auth"
API_NAME = "SYNO.API.Auth"


async def login(
    transport: SynologyTransport,
    base_url: str,
    account: str,
    passwd: str,
    session: SessionName | str,
    version: int,
    timeout: float | None = None,
    referer: str | None = None,
) -> SynologyResponse:
    """Open a session; the ``sid`` comes back in ``data["sid"]``."""
    return await transport.get(
        base_url,
        CGI_NAME,
        {
            "account": account,
            "passwd": passwd,
            "session": str(session),
            "api": API_NAME,
            "version": version,
            "method": "login",
            "format": "sid",
        },
        timeout=timeout,
        referer=referer,
    )


async def logout(
    transport: SynologyTransport,
    base_url: str,
    sid: str,
    session: SessionName | str,
    timeout: float | None = None,
    referer: str | None = None,
) -> SynologyResponse:
    return await transport.get(
        base_url,
        CGI_NAME,
        {
            "session": str(session),
            "api": API_NAME,
            "version": 1,
            "method": "logout",
            "sid": sid,
        },
        timeout=timeout,
        referer=referer,
    )
