"""Session-aware wrapper around DSM API operations.

:meth:`RequestProxy.wrap` turns an operation ``(base_url, sid, **options)``
into ``(**options)``:

1. read the settings generation,
2. acquire a session (logging in if needed),
3. run the operation with the session id,
4. if settings changed while awaiting, throw the result away and start
   over with the new settings,
5. on a session error (105 / 106) drop the cached login and try once more.

Errors come back as values: :class:`SynologyFailure` for replies from the
NAS, :class:`ConnectionFailure` for everything else.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from synology_gateway.constants import RECOVERABLE_SESSION_ERROR_CODES
from synology_gateway.errors import ConnectionFailure
from synology_gateway.responses import SynologyFailure, SynologyResponse
from synology_gateway.session import LoginResult, SessionManager

logger = logging.getLogger(__name__)

RemoteOperation = Callable[..., Awaitable[SynologyResponse]]
ProxiedOperation = Callable[..., Awaitable[SynologyResponse | ConnectionFailure]]


def is_recoverable(response: SynologyResponse) -> bool:
    """Whether *response* says the session is no longer valid."""
    return isinstance(response, SynologyFailure) and response.code in RECOVERABLE_SESSION_ERROR_CODES


class RequestProxy:
    """Runs remote operations inside a managed DSM session.

    Args:
        sessions: The session manager that owns settings and login state.
    """

    def __init__(self, sessions: SessionManager) -> None:
        self._sessions = sessions

    def wrap(self, operation: RemoteOperation) -> ProxiedOperation:
        """Return a coroutine function calling *operation* through :meth:`call`."""

        async def proxied(**options: Any) -> SynologyResponse | ConnectionFailure:
            return await self.call(operation, **options)

        proxied.__doc__ = getattr(operation, "__doc__", None)
        return proxied

    async def call(self, operation: RemoteOperation, **options: Any) -> SynologyResponse | ConnectionFailure:
        """Invoke *operation* with auto-login and one session-recovery retry."""
        may_recover_session = True

        while True:
            epoch = self._sessions.settings_version

            try:
                attempt = await self._attempt(operation, epoch, options)
            except Exception as exc:
                return ConnectionFailure.from_exception(exc)

            if attempt is None:
                # Settings changed mid-flight; the restarted call may recover again.
                logger.debug("Settings changed during call (epoch=%d), restarting", epoch)
                may_recover_session = True
                continue

            session, result = attempt
            if may_recover_session and is_recoverable(result):
                logger.info("Session expired (code=%d), re-authenticating...", result.code)
                self._sessions.clear_session(session)
                may_recover_session = False
                continue

            return result

    async def _attempt(
        self,
        operation: RemoteOperation,
        epoch: int,
        options: dict[str, Any],
    ) -> tuple[LoginResult | ConnectionFailure, SynologyResponse | ConnectionFailure] | None:
        """One pass; returns the session used and the outcome.

        ``None`` means the settings generation went stale.
        """
        session = await self._sessions.acquire_session()
        if self._sessions.is_stale(epoch):
            return None
        if isinstance(session, ConnectionFailure | SynologyFailure):
            return session, session

        response = await operation(self._sessions.settings.base_url, session.sid, **options)
        if self._sessions.is_stale(epoch):
            return None
        return session, response
