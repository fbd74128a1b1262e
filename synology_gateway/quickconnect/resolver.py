"""Resolve a QuickConnect id to a reachable ``hostname:port``.

Control hosts are tried one after the other.  For each, the server-info
descriptor is fetched and validated, candidates are generated, and every
candidate is probed in preference order.  The first candidate whose
probe succeeds *and* reports ``ezid == md5(serverID)`` wins.

Usage::

    async with QuickConnectClient() as qc:
        resolver = QuickConnectResolver(qc)
        connection = await resolver.resolve("my-nas", Protocol.HTTPS)
        base_url = connection.base_url(Protocol.HTTPS)
"""

from __future__ import annotations

import hashlib
import logging

import httpx

from synology_gateway.quickconnect.api import QuickConnectClient, construct_quickconnect_referer
from synology_gateway.quickconnect.candidates import generate_connection_candidates, order_candidates
from synology_gateway.quickconnect.errors import (
    InvalidServerInfoError,
    PingPongError,
    QuickConnectError,
    QuickConnectResolutionError,
    QuickConnectServerError,
)
from synology_gateway.quickconnect.models import (
    ConnectionCandidate,
    Protocol,
    QuickConnectErrorResponse,
    TunnelMode,
)
from synology_gateway.quickconnect.series import SeriesExhaustedError, series

logger = logging.getLogger(__name__)


def server_id_hash(server_id: str) -> str:
    """The ``ezid`` a genuine NAS reports: hex MD5 of its server id."""
    return hashlib.md5(server_id.encode("utf-8"), usedforsecurity=False).hexdigest()


class QuickConnectResolver:
    """Finds a working connection to a NAS given only its QuickConnect id.

    Args:
        client: QuickConnect protocol client.
    """

    def __init__(self, client: QuickConnectClient) -> None:
        self._client = client

    async def resolve(
        self,
        quickconnect_id: str,
        protocol: Protocol | str = Protocol.HTTPS,
        tunnel: TunnelMode | str = TunnelMode.INCLUDE,
    ) -> ConnectionCandidate:
        """Return the first verified connection candidate.

        Raises:
            QuickConnectResolutionError: If the control host list could not
                be fetched or no control host led to a verified candidate.
        """
        protocol = Protocol(protocol)
        tunnel = TunnelMode(tunnel)

        try:
            control_hosts = await self._client.get_control_list()
        except (httpx.HTTPError, ValueError, QuickConnectError) as exc:
            raise QuickConnectResolutionError(f"could not fetch the control host list: {exc}") from exc

        try:
            connection = await series(
                control_hosts,
                lambda control_host: self.try_control_host(control_host, quickconnect_id, protocol, tunnel),
            )
        except SeriesExhaustedError as exc:
            raise QuickConnectResolutionError(
                f"no control host could provide a reachable DSM for {quickconnect_id!r}",
                errors=exc.errors,
            ) from exc

        logger.info(
            "Resolved QuickConnect id %s to %s:%d (%s)",
            quickconnect_id,
            connection.hostname,
            connection.port,
            connection.type,
        )
        return connection

    async def try_control_host(
        self,
        control_host: str,
        quickconnect_id: str,
        protocol: Protocol,
        tunnel: TunnelMode,
    ) -> ConnectionCandidate:
        """Resolve through a single control host.

        Raises:
            QuickConnectServerError: The control host answered with an error.
            InvalidServerInfoError: The descriptor failed validation.
            SeriesExhaustedError: No candidate passed the liveness probe.
        """
        # request_tunnel returns a superset of get_server_info; only skip it
        # when the relay is excluded anyway.
        if tunnel is TunnelMode.EXCLUDE:
            result = await self._client.get_server_info(control_host, quickconnect_id, protocol)
        else:
            result = await self._client.request_tunnel(control_host, quickconnect_id, protocol)

        if isinstance(result, QuickConnectErrorResponse):
            logger.debug("Control host %s returned error: %s", control_host, result.errinfo)
            raise QuickConnectServerError(result.errinfo, result.errno)
        if not result.is_valid():
            logger.debug("Control host %s returned invalid server info", control_host)
            raise InvalidServerInfoError(control_host)

        candidates = order_candidates(
            generate_connection_candidates(
                quickconnect_id,
                protocol.default_port,
                result,
                tunnel,
                domain=self._client.domain,
            )
        )
        expected_ezid = server_id_hash(result.server.serverID)
        referer = construct_quickconnect_referer(quickconnect_id, protocol, self._client.domain)

        async def probe(candidate: ConnectionCandidate) -> ConnectionCandidate:
            logger.debug("Probing %s candidate %s:%d", candidate.type, candidate.hostname, candidate.port)
            response = await self._client.ping_pong(candidate.base_url(protocol), referer=referer)
            if not response.success:
                raise PingPongError("unsuccessful response from candidate connection")
            if response.ezid != expected_ezid:
                raise PingPongError("pingpong response has incorrect ezid")
            return candidate

        return await series(candidates, probe)


async def resolve_quickconnect_id(
    quickconnect_id: str,
    protocol: Protocol | str = Protocol.HTTPS,
    tunnel: TunnelMode | str = TunnelMode.INCLUDE,
    client: QuickConnectClient | None = None,
) -> ConnectionCandidate:
    """One-shot resolution; closes the client it creates."""
    if client is not None:
        return await QuickConnectResolver(client).resolve(quickconnect_id, protocol, tunnel)

    async with QuickConnectClient.from_settings() as owned_client:
        return await QuickConnectResolver(owned_client).resolve(quickconnect_id, protocol, tunnel)
