"""HTTP client for the QuickConnect discovery protocol.

The protocol is reverse-engineered from the QuickConnect web portal:

- ``POST https://global.<domain>/Serv.php`` ``get_site_list`` -- control hosts
- ``POST https://<control-host>/Serv.php`` ``get_server_info`` / ``request_tunnel``
- ``GET <candidate>/webman/pingpong.cgi?action=cors`` -- liveness probe

Control hosts are contacted with TLS verification on.  Probes go to raw
IP addresses and DSM's self-signed certificate, so they skip it; the
identity check is the ``ezid`` in the probe reply instead.
"""

from __future__ import annotations

import logging

import httpx

from synology_gateway.config import Settings, get_settings
from synology_gateway.constants import DEFAULT_QUICKCONNECT_DOMAIN, DEFAULT_QUICKCONNECT_TIMEOUT
from synology_gateway.quickconnect.errors import QuickConnectError
from synology_gateway.quickconnect.models import (
    PingPongResponse,
    Protocol,
    QuickConnectErrorResponse,
    QuickConnectServerInfo,
    parse_server_info_response,
)

logger = logging.getLogger(__name__)


def construct_quickconnect_referer(
    quickconnect_id: str,
    protocol: Protocol | str,
    domain: str = DEFAULT_QUICKCONNECT_DOMAIN,
) -> str:
    """The ``Referer`` the portal would send for *quickconnect_id*."""
    return f"{protocol}://{quickconnect_id}.{domain}"


class QuickConnectClient:
    """Async client for QuickConnect control hosts and DSM liveness probes.

    Args:
        domain: QuickConnect domain (``quickconnect.to``).
        timeout: Default per-request timeout in seconds.
        client: Optional ``httpx.AsyncClient`` for control-host requests.
        probe_client: Optional ``httpx.AsyncClient`` for liveness probes.
    """

    def __init__(
        self,
        domain: str = DEFAULT_QUICKCONNECT_DOMAIN,
        timeout: float = DEFAULT_QUICKCONNECT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        probe_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.domain = domain
        self._timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._probe_client = probe_client or httpx.AsyncClient(timeout=timeout, verify=False)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> QuickConnectClient:
        settings = settings or get_settings()
        return cls(domain=settings.QUICKCONNECT_DOMAIN, timeout=settings.QUICKCONNECT_TIMEOUT)

    @staticmethod
    def serv_url(host: str) -> str:
        return f"https://{host}/Serv.php"

    async def _post_serv(self, host: str, body: dict[str, object], timeout: float | None) -> dict:
        response = await self._client.post(self.serv_url(host), json=body, timeout=timeout or self._timeout)
        response.raise_for_status()
        return response.json()

    # ------------------------------------------------------------------
    # Control hosts
    # ------------------------------------------------------------------

    async def get_control_list(self, timeout: float | None = None) -> list[str]:
        """Fetch the control hosts from ``global.<domain>``."""
        data = await self._post_serv(
            f"global.{self.domain}",
            {"version": 1, "command": "get_site_list"},
            timeout,
        )
        sites = data.get("sites") if isinstance(data, dict) else None
        if not isinstance(sites, list):
            raise QuickConnectError(f"unexpected site list response: {data!r}")
        logger.debug("QuickConnect control hosts: %s", sites)
        return [str(site) for site in sites]

    async def get_server_info(
        self,
        control_host: str,
        quickconnect_id: str,
        protocol: Protocol | str,
        timeout: float | None = None,
    ) -> QuickConnectServerInfo | QuickConnectErrorResponse:
        return await self._server_command("get_server_info", control_host, quickconnect_id, protocol, timeout)

    async def request_tunnel(
        self,
        control_host: str,
        quickconnect_id: str,
        protocol: Protocol | str,
        timeout: float | None = None,
    ) -> QuickConnectServerInfo | QuickConnectErrorResponse:
        """Like :meth:`get_server_info`, but also sets up the relay tunnel."""
        return await self._server_command("request_tunnel", control_host, quickconnect_id, protocol, timeout)

    async def _server_command(
        self,
        command: str,
        control_host: str,
        quickconnect_id: str,
        protocol: Protocol | str,
        timeout: float | None,
    ) -> QuickConnectServerInfo | QuickConnectErrorResponse:
        data = await self._post_serv(
            control_host,
            {
                "version": 1,
                "command": command,
                "id": Protocol(protocol).portal_id,
                "serverID": quickconnect_id,
            },
            timeout,
        )
        return parse_server_info_response(data)

    # ------------------------------------------------------------------
    # Liveness probe
    # ------------------------------------------------------------------

    async def ping_pong(
        self,
        base_url: str,
        referer: str | None = None,
        timeout: float | None = None,
    ) -> PingPongResponse:
        """Probe ``<base_url>/webman/pingpong.cgi``."""
        response = await self._probe_client.get(
            f"{base_url}/webman/pingpong.cgi",
            params={"action": "cors"},
            headers={"Referer": referer} if referer else {},
            timeout=timeout or self._timeout,
        )
        response.raise_for_status()
        return PingPongResponse.model_validate(response.json())

    async def close(self) -> None:
        await self._client.aclose()
        await self._probe_client.aclose()

    async def __aenter__(self) -> QuickConnectClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
