"""QuickConnect: find a NAS from its QuickConnect id."""

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
    ConnectionInfo,
    ConnectionType,
    Protocol,
    QuickConnectServerInfo,
    TunnelMode,
)
from synology_gateway.quickconnect.resolver import QuickConnectResolver, resolve_quickconnect_id
from synology_gateway.quickconnect.series import SeriesExhaustedError, series

__all__ = [
    "ConnectionCandidate",
    "ConnectionInfo",
    "ConnectionType",
    "InvalidServerInfoError",
    "PingPongError",
    "Protocol",
    "QuickConnectClient",
    "QuickConnectError",
    "QuickConnectResolutionError",
    "QuickConnectResolver",
    "QuickConnectServerError",
    "QuickConnectServerInfo",
    "SeriesExhaustedError",
    "TunnelMode",
    "construct_quickconnect_referer",
    "generate_connection_candidates",
    "order_candidates",
    "resolve_quickconnect_id",
    "series",
]
