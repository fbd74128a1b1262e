from enum import StrEnum


class SessionName(StrEnum):
    """API groups this client can open a DSM session for."""

    DOWNLOAD_STATION = "DownloadStation"
    FILE_STATION = "FileStation"


# 105 = session does not have permission (typically expired)
# 106 = session timeout
NO_PERMISSION_ERROR_CODE = 105
SESSION_TIMEOUT_ERROR_CODE = 106
RECOVERABLE_SESSION_ERROR_CODES: frozenset[int] = frozenset(
    {NO_PERMISSION_ERROR_CODE, SESSION_TIMEOUT_ERROR_CODE}
)

# Highest SYNO.API.Auth version we speak; anything older falls back to 1.
AUTH_API_PREFERRED_VERSION = 4
AUTH_API_LEGACY_VERSION = 1

DEFAULT_REQUEST_TIMEOUT = 60.0
DEFAULT_QUICKCONNECT_TIMEOUT = 5.0
DEFAULT_QUICKCONNECT_DOMAIN = "quickconnect.to"
