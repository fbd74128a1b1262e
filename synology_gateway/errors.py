"""Local (transport-level) failures.

A :class:`ConnectionFailure` is never a reply from the device: it means
the request could not be made at all, or never got a usable answer.
Failures are returned as values from the session and proxy layers, so
callers pattern-match on them instead of catching exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ConnectionFailureType(StrEnum):
    MISSING_CONFIG = "missing-config"
    PROBABLE_WRONG_PROTOCOL = "probable-wrong-protocol"
    PROBABLE_WRONG_URL_OR_NO_CONNECTION_OR_CERT_ERROR = (
        "probable-wrong-url-or-no-connection-or-cert-error"
    )
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ConnectionFailure:
    """Why a request never produced a DSM response.

    Attributes:
        type: The failure category.
        error: The exception that caused it (``None`` for ``missing-config``).
    """

    type: ConnectionFailureType
    error: BaseException | None = None

    @classmethod
    def missing_config(cls) -> ConnectionFailure:
        return cls(ConnectionFailureType.MISSING_CONFIG)

    @classmethod
    def from_exception(cls, error: BaseException) -> ConnectionFailure:
        """Classify an exception raised while talking to the NAS.

        httpx timeouts are a subclass of its transport errors, so they
        are checked first.
        """
        if isinstance(error, httpx.HTTPStatusError) and error.response.status_code == 400:
            failure_type = ConnectionFailureType.PROBABLE_WRONG_PROTOCOL
        elif isinstance(error, httpx.TimeoutException):
            failure_type = ConnectionFailureType.TIMEOUT
        elif isinstance(error, httpx.TransportError):
            failure_type = ConnectionFailureType.PROBABLE_WRONG_URL_OR_NO_CONNECTION_OR_CERT_ERROR
        else:
            failure_type = ConnectionFailureType.UNKNOWN

        logger.debug("Connection failure (%s): %r", failure_type, error)
        return cls(failure_type, error)


def is_connection_failure(result: Any) -> bool:
    return isinstance(result, ConnectionFailure)
