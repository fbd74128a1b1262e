"""Pydantic v2 schemas for the QuickConnect protocol.

The protocol is undocumented, so every field is optional and unknown
fields are kept.  Ports sometimes arrive as strings (``ext_port`` in
particular), hence the ``int | str`` unions.

- QuickConnectServerInfo: ``get_server_info`` / ``request_tunnel`` reply
- QuickConnectErrorResponse: error reply from a control host
- PingPongResponse: ``/webman/pingpong.cgi`` reply
- ConnectionInfo / ConnectionCandidate: where to reach the NAS
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Protocol(StrEnum):
    HTTP = "http"
    HTTPS = "https"

    @property
    def default_port(self) -> int:
        return 80 if self is Protocol.HTTP else 443

    @property
    def portal_id(self) -> str:
        return "dsm_portal" if self is Protocol.HTTP else "dsm_portal_https"


class TunnelMode(StrEnum):
    """Whether the relay tunnel may, must, or must not be used."""

    EXCLUDE = "exclude"
    INCLUDE = "include"
    REQUIRE = "require"


class ConnectionType(StrEnum):
    LAN_IPV4 = "LAN_IPV4"
    LAN_IPV6 = "LAN_IPV6"
    FQDN = "FQDN"
    DDNS = "DDNS"
    WAN_IPV6 = "WAN_IPV6"
    WAN_IPV4 = "WAN_IPV4"
    TUN = "TUN"


# The portal itself tries every non-tunnel https variant, then the http
# ones, then the tunnel.  We ask for one protocol up front instead.
PREFERRED_CONNECTION_ORDERING: tuple[ConnectionType, ...] = (
    ConnectionType.LAN_IPV4,
    ConnectionType.LAN_IPV6,
    ConnectionType.FQDN,
    ConnectionType.DDNS,
    ConnectionType.WAN_IPV6,
    ConnectionType.WAN_IPV4,
    ConnectionType.TUN,
)


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow")


class IPv6Interface(_Lenient):
    scope: str | None = None
    address: str | None = None
    prefix_length: int | None = None
    addr_type: int | None = None


class NetworkInterface(_Lenient):
    mask: str | None = None
    name: str | None = None
    ip: str | None = None
    ipv6: list[IPv6Interface] | None = None


class ExternalAddress(_Lenient):
    ip: str | None = None
    ipv6: str | None = None


class ServerDescriptor(_Lenient):
    ddns: str | None = None
    ds_state: str | None = None
    serverID: str | None = None
    gateway: str | None = None
    interface: list[NetworkInterface] | None = None
    version: str | None = None
    fqdn: str | None = None
    udp_punch_port: int | None = None
    external: ExternalAddress | None = None


class ServiceDescriptor(_Lenient):
    pingpong_desc: list[Any] | None = None
    ext_port: int | str | None = None
    relay_ip: str | None = None
    relay_ipv6: str | None = None
    https_ip: str | None = None
    port: int | str | None = None
    relay_dualstack: str | None = None
    https_port: int | str | None = None
    pingpong: str | None = None
    relay_dn: str | None = None
    relay_port: int | str | None = None


class EnvDescriptor(_Lenient):
    control_host: str | None = None
    relay_region: str | None = None


class QuickConnectServerInfo(_Lenient):
    command: str | None = None
    server: ServerDescriptor | None = None
    service: ServiceDescriptor | None = None
    errno: int | None = None
    env: EnvDescriptor | None = None
    version: int | None = None

    def is_valid(self) -> bool:
        """Apply the portal's validity rule before trusting the descriptor."""
        return bool(
            self.errno == 0
            and self.server is not None
            and self.server.interface is not None
            and self.server.external is not None
            and self.server.external.ip
            and self.server.serverID
            and self.service is not None
            and self.service.port
            and self.service.ext_port
            and self.env is not None
            and self.env.control_host
            and self.env.relay_region
        )

    def has_tunnel(self) -> bool:
        return bool(self.service is not None and self.service.relay_ip and self.service.relay_port)


class QuickConnectErrorResponse(_Lenient):
    errinfo: str
    errno: int | None = None
    command: str | None = None
    version: int | None = None


class PingPongResponse(_Lenient):
    success: bool = False
    boot_done: bool | None = None
    disk_hibernation: bool | None = None
    ezid: str | None = None


def parse_server_info_response(payload: dict[str, Any]) -> QuickConnectServerInfo | QuickConnectErrorResponse:
    if "errinfo" in payload:
        return QuickConnectErrorResponse.model_validate(payload)
    return QuickConnectServerInfo.model_validate(payload)


@dataclass(frozen=True)
class ConnectionInfo:
    """A reachable ``hostname:port``; IPv6 hostnames are already bracketed."""

    hostname: str
    port: int

    def base_url(self, protocol: Protocol | str) -> str:
        return f"{protocol}://{self.hostname}:{self.port}"


@dataclass(frozen=True)
class ConnectionCandidate(ConnectionInfo):
    type: ConnectionType
