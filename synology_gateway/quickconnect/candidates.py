"""Connection candidate generation.

Turns a server-info descriptor into the list of ``hostname:port`` pairs
worth probing, grouped by :class:`ConnectionType` and ordered by
:data:`PREFERRED_CONNECTION_ORDERING`.  An adaptation of the portal's
"addCase" logic; pure, no I/O.
"""

from __future__ import annotations

from typing import Any

from synology_gateway.constants import DEFAULT_QUICKCONNECT_DOMAIN
from synology_gateway.quickconnect.addresses import format_hostname, is_loopback, is_private
from synology_gateway.quickconnect.models import (
    PREFERRED_CONNECTION_ORDERING,
    ConnectionCandidate,
    ConnectionType,
    QuickConnectServerInfo,
    TunnelMode,
)

CandidateGroups = dict[ConnectionType, list[ConnectionCandidate]]


def _to_port(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def external_port(ext_port: Any, port: int) -> int | None:
    """Return *ext_port* only if it is worth probing separately.

    The internal and external ports are usually identical; probing both
    would waste a round trip.
    """
    parsed = _to_port(ext_port)
    if parsed is None or parsed == 0 or parsed == port:
        return None
    return parsed


def generate_connection_candidates(
    quickconnect_id: str,
    default_port: int,
    info: QuickConnectServerInfo,
    tunnel: TunnelMode | str = TunnelMode.INCLUDE,
    domain: str = DEFAULT_QUICKCONNECT_DOMAIN,
) -> CandidateGroups:
    """Build candidate connections from a validated server-info descriptor.

    Args:
        quickconnect_id: The QuickConnect id (used for the relay hostname).
        default_port: Port of the chosen protocol, used for the relay.
        info: A descriptor that passed :meth:`QuickConnectServerInfo.is_valid`.
        tunnel: ``require`` drops direct candidates, ``exclude`` drops the relay.
        domain: QuickConnect domain the relay hostnames live under.

    Returns:
        Candidates per connection type, each list in descriptor order.
    """
    tunnel = TunnelMode(tunnel)
    candidates: CandidateGroups = {connection_type: [] for connection_type in ConnectionType}

    def add(connection_type: ConnectionType, hostname: str, candidate_port: int) -> None:
        candidates[connection_type].append(
            ConnectionCandidate(hostname=format_hostname(hostname), port=candidate_port, type=connection_type)
        )

    port = _to_port(info.service.port) if info.service is not None else None

    server = info.server
    if port is not None and server is not None and tunnel in (TunnelMode.INCLUDE, TunnelMode.EXCLUDE):
        ext_port = external_port(info.service.ext_port, port)

        def add_with_ext_port(connection_type: ConnectionType, hostname: str) -> None:
            if ext_port:
                add(connection_type, hostname, ext_port)

        for iface in server.interface or []:
            for ipv6 in iface.ipv6 or []:
                if ipv6.address:
                    add(
                        ConnectionType.LAN_IPV6 if ipv6.scope == "link" else ConnectionType.WAN_IPV6,
                        ipv6.address,
                        port,
                    )
                    add_with_ext_port(ConnectionType.WAN_IPV6, ipv6.address)

            if iface.ip and not is_loopback(iface.ip):
                add(
                    ConnectionType.LAN_IPV4 if is_private(iface.ip) else ConnectionType.WAN_IPV4,
                    iface.ip,
                    port,
                )
                add_with_ext_port(ConnectionType.WAN_IPV4, iface.ip)

        if server.ddns and server.ddns != "NULL":
            add(ConnectionType.DDNS, server.ddns, port)
            add_with_ext_port(ConnectionType.DDNS, server.ddns)

        if server.fqdn and server.fqdn != "NULL":
            add(ConnectionType.FQDN, server.fqdn, port)
            add_with_ext_port(ConnectionType.FQDN, server.fqdn)

        # Filed under LAN by the portal too, even though it is the WAN address.
        if server.external is not None and server.external.ip:
            add(ConnectionType.LAN_IPV4, server.external.ip, port)
            add_with_ext_port(ConnectionType.LAN_IPV4, server.external.ip)

    if info.has_tunnel() and tunnel in (TunnelMode.INCLUDE, TunnelMode.REQUIRE):
        relay_region = info.env.relay_region if info.env is not None else None
        add(ConnectionType.TUN, f"{quickconnect_id}.{relay_region}.{domain}", default_port)

    return candidates


def order_candidates(candidates: CandidateGroups) -> list[ConnectionCandidate]:
    """Flatten candidate groups in preferred connection order."""
    return [
        candidate
        for connection_type in PREFERRED_CONNECTION_ORDERING
        for candidate in candidates.get(connection_type, [])
    ]
