"""QuickConnect resolution errors."""

from __future__ import annotations


class QuickConnectError(Exception):
    """Base class for QuickConnect failures.

    Attributes:
        message: A human-readable description of the failure.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class QuickConnectServerError(QuickConnectError):
    """A control host answered with an error payload.

    Attributes:
        errno: The error number reported by the control host.
    """

    def __init__(self, errinfo: str, errno: int | None = None) -> None:
        self.errno = errno
        super().__init__(errinfo or f"QuickConnect error (errno: {errno})")


class InvalidServerInfoError(QuickConnectError):
    """A control host returned server info that fails validation."""

    def __init__(self, control_host: str) -> None:
        self.control_host = control_host
        super().__init__(f"server info returned by {control_host} is invalid")


class PingPongError(QuickConnectError):
    """A candidate did not answer the liveness probe, or answered as someone else."""


class QuickConnectResolutionError(QuickConnectError):
    """No control host led to a reachable, authentic NAS.

    Attributes:
        errors: The per-control-host failures, in the order they were tried.
    """

    def __init__(self, message: str, errors: list[Exception] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
