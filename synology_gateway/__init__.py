"""Async client for the Synology DSM Web API with QuickConnect resolution."""

from synology_gateway.client import SynologyClient
from synology_gateway.config import ApiClientSettings, Settings, get_settings
from synology_gateway.constants import SessionName
from synology_gateway.errors import ConnectionFailure, ConnectionFailureType, is_connection_failure
from synology_gateway.proxy import RequestProxy
from synology_gateway.responses import SynologyFailure, SynologyResponse, SynologySuccess
from synology_gateway.session import NOT_LOGGED_IN, Session, SessionManager
from synology_gateway.transport import FormFile, SynologyTransport

__all__ = [
    "NOT_LOGGED_IN",
    "ApiClientSettings",
    "ConnectionFailure",
    "ConnectionFailureType",
    "FormFile",
    "RequestProxy",
    "Session",
    "SessionManager",
    "SessionName",
    "Settings",
    "SynologyClient",
    "SynologyFailure",
    "SynologyResponse",
    "SynologySuccess",
    "SynologyTransport",
    "get_settings",
    "is_connection_failure",
]
