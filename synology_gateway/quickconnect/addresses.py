"""Address classification helpers for QuickConnect candidates.

The ranges mirror what the QuickConnect web portal treats as "private"
and "loopback", which is not quite :attr:`ipaddress.IPv4Address.is_private`:
only RFC 1918, loopback, link-local and IPv6 ULA / link-local count, and
IPv4-mapped IPv6 addresses (``::ffff:a.b.c.d``) are judged by their IPv4
part.  Anything that does not parse as an IP address is neither.
"""

from __future__ import annotations

import ipaddress

_IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

_PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(network)
    for network in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "fc00::/7",
        "fe80::/16",
        "::1/128",
        "::/128",
    )
)

_LOOPBACK_NETWORKS = tuple(
    ipaddress.ip_network(network)
    for network in (
        "127.0.0.0/8",
        "fe80::1/128",
        "::1/128",
        "::/128",
    )
)


def _parse(address: str) -> _IPAddress | None:
    try:
        parsed = ipaddress.ip_address(address.strip())
    except ValueError:
        return None
    if isinstance(parsed, ipaddress.IPv6Address) and parsed.ipv4_mapped is not None:
        return parsed.ipv4_mapped
    return parsed


def _in_any(address: str, networks: tuple) -> bool:
    parsed = _parse(address)
    if parsed is None:
        return False
    return any(parsed.version == network.version and parsed in network for network in networks)


def is_private(address: str) -> bool:
    return _in_any(address, _PRIVATE_NETWORKS)


def is_loopback(address: str) -> bool:
    return _in_any(address, _LOOPBACK_NETWORKS)


def is_ipv4(address: str) -> bool:
    try:
        ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return True


def is_ipv6(address: str) -> bool:
    try:
        ipaddress.IPv6Address(address)
    except ValueError:
        return False
    return True


def format_hostname(hostname: str) -> str:
    """Bracket IPv6 literals so they can be embedded in a URL."""
    if is_ipv6(hostname) and not is_ipv4(hostname):
        return f"[{hostname}]"
    return hostname
