"""DSM session management.

:class:`SessionManager` owns everything that is shared between concurrent
calls:

- the :class:`~synology_gateway.config.ApiClientSettings` snapshot,
- the settings generation (``settings_version``), bumped once per change,
- the single in-flight (or finished) login, held in :class:`PendingLogin`,
- the settings-change listeners.

All of it is mutated only from the event loop thread, so no locking is
needed: the generation is read before an ``await`` and compared after it.

Login negotiates the ``SYNO.API.Auth`` version: 4 when the NAS advertises
it, otherwise the legacy version 1.  Legacy logins also set session
cookies on the response, which clobber a browser session on the same
host, so callers get told via :attr:`Session.is_legacy_login`.

Failures are returned, never raised: a :class:`SynologyFailure` when the
NAS refused, a :class:`ConnectionFailure` when it could not be reached.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any, Literal

from synology_gateway.api import auth, info
from synology_gateway.config import ApiClientSettings
from synology_gateway.constants import AUTH_API_LEGACY_VERSION, AUTH_API_PREFERRED_VERSION
from synology_gateway.errors import ConnectionFailure
from synology_gateway.responses import SynologyFailure, SynologyResponse
from synology_gateway.transport import SynologyTransport

logger = logging.getLogger(__name__)

NOT_LOGGED_IN: Literal["not-logged-in"] = "not-logged-in"

SettingsListener = Callable[[], None]


@dataclass(frozen=True)
class Session:
    """An authenticated DSM session.

    Attributes:
        sid: Opaque session id sent as ``_sid`` on every call.
        is_legacy_login: ``True`` when the v1 login API was used.
    """

    sid: str
    is_legacy_login: bool = False


LoginResult = Session | SynologyFailure


class _LoginHandle:
    """One login attempt and the settings it was made with."""

    def __init__(self, task: asyncio.Task[LoginResult], settings: ApiClientSettings) -> None:
        self._task = task
        self.settings = settings

    async def wait(self) -> LoginResult:
        # Shielded so a cancelled waiter does not cancel the shared login.
        return await asyncio.shield(self._task)

    def resolved_to(self, result: object) -> bool:
        """Whether this login finished and produced exactly *result*."""
        task = self._task
        return task.done() and not task.cancelled() and task.exception() is None and task.result() is result


class PendingLogin:
    """Single-slot holder for the current login.

    At most one login is pending or resolved at any time.  The slot is
    filled by :meth:`get_or_start` and emptied by :meth:`take` or
    :meth:`clear`; the underlying task never leaves this module.
    """

    def __init__(self) -> None:
        self._handle: _LoginHandle | None = None

    def __bool__(self) -> bool:
        return self._handle is not None

    def get_or_start(
        self,
        settings: ApiClientSettings,
        start: Callable[[], Coroutine[Any, Any, LoginResult]],
    ) -> _LoginHandle:
        if self._handle is None:
            self._handle = _LoginHandle(asyncio.ensure_future(start()), settings)
        return self._handle

    def take(self) -> _LoginHandle | None:
        handle, self._handle = self._handle, None
        return handle

    def clear(self, handle: _LoginHandle | None = None) -> None:
        """Empty the slot (only if it still holds *handle*, when given)."""
        if handle is None or self._handle is handle:
            self._handle = None

    def discard(self, result: object) -> bool:
        """Empty the slot only if it holds the login that produced *result*.

        A newer login (pending or finished) started by someone else is
        left alone.
        """
        if self._handle is not None and self._handle.resolved_to(result):
            self._handle = None
            return True
        return False


class SessionManager:
    """Owns the settings snapshot, the generation counter and the login.

    Args:
        settings: Initial settings; may be incomplete.
        transport: DSM transport used for the info query, login and logout.
    """

    def __init__(
        self,
        settings: ApiClientSettings | None,
        transport: SynologyTransport,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._settings_version = 0
        self._pending = PendingLogin()
        self._listeners: list[SettingsListener] = []
        self._background: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def settings(self) -> ApiClientSettings | None:
        return self._settings

    @property
    def settings_version(self) -> int:
        return self._settings_version

    def is_stale(self, epoch: int) -> bool:
        """Whether settings changed since *epoch* was read."""
        return self._settings_version != epoch

    def is_fully_configured(self) -> bool:
        return self._settings is not None and self._settings.is_fully_configured()

    def update_settings(self, settings: ApiClientSettings | None) -> bool:
        """Replace the settings if any field differs.

        On change the generation is bumped, the current login (if any) is
        logged out in the background, and listeners are notified.  A
        listener that raises is logged and the rest are still notified.

        Returns:
            ``True`` if the settings changed, ``False`` otherwise.
        """
        if settings is None or not settings.differs_from(self._settings):
            return False

        self._settings_version += 1
        self._settings = settings
        logger.info("Settings changed (version=%d)", self._settings_version)

        handle = self._pending.take()
        if handle is not None:
            self._spawn(self._release(handle, {}))

        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Settings-change listener failed")
        return True

    def on_settings_change(self, listener: SettingsListener) -> Callable[[], None]:
        """Register *listener*; returns a disposer that unregisters it."""
        self._listeners.append(listener)
        subscribed = True

        def dispose() -> None:
            nonlocal subscribed
            if subscribed:
                self._listeners = [registered for registered in self._listeners if registered is not listener]
                subscribed = False

        return dispose

    # ------------------------------------------------------------------
    # Login / logout
    # ------------------------------------------------------------------

    async def acquire_session(self, **extra: Any) -> LoginResult | ConnectionFailure:
        """Return the current session, logging in if there is none.

        Concurrent callers share a single login request.

        Args:
            **extra: ``timeout`` / ``referer`` forwarded to the login requests.
        """
        settings = self._settings
        if settings is None or not settings.is_fully_configured():
            return ConnectionFailure.missing_config()

        handle = self._pending.get_or_start(settings, lambda: self._login(settings, extra))
        try:
            return await handle.wait()
        except Exception as exc:
            # Unreachable NAS: forget the attempt so the next call retries.
            self._pending.clear(handle)
            return ConnectionFailure.from_exception(exc)

    async def release_session(self, **extra: Any) -> SynologyResponse | ConnectionFailure | Literal["not-logged-in"]:
        """Best-effort logout of the current session.

        The cached login is dropped immediately, so the next call logs in
        again no matter how this logout turns out.  The result is only
        informational.
        """
        handle = self._pending.take()
        if handle is None:
            return NOT_LOGGED_IN
        return await self._release(handle, extra)

    def clear_session(self, rejected: LoginResult | ConnectionFailure | None = None) -> None:
        """Forget the cached login without logging out.

        With *rejected* (the session a request was refused with, or the
        failed login result), only that login is forgotten; a newer login
        another caller already started is kept.
        """
        if rejected is None:
            self._pending.clear()
        elif self._pending.discard(rejected):
            logger.debug("Dropped rejected session")

    async def wait_background(self) -> None:
        """Wait for background logouts started by :meth:`update_settings`."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    async def _login(self, settings: ApiClientSettings, extra: dict[str, Any]) -> LoginResult:
        versions = await info.query(self._transport, settings.base_url, [auth.API_NAME], **extra)
        advertised = info.max_version(versions, auth.API_NAME)
        version = (
            AUTH_API_PREFERRED_VERSION
            if advertised is not None and advertised >= AUTH_API_PREFERRED_VERSION
            else AUTH_API_LEGACY_VERSION
        )

        response = await auth.login(
            self._transport,
            settings.base_url,
            account=settings.account,
            passwd=settings.passwd,
            session=settings.session,
            version=version,
            **extra,
        )

        if isinstance(response, SynologyFailure):
            logger.warning("Synology login failed (code=%d)", response.code)
            return response

        sid = response.data["sid"]
        is_legacy_login = version == AUTH_API_LEGACY_VERSION
        if is_legacy_login:
            logger.warning(
                "NAS does not advertise SYNO.API.Auth v%d; used legacy login, "
                "which also sets session cookies",
                AUTH_API_PREFERRED_VERSION,
            )
        logger.info("Synology login successful (sid=%s...)", sid[:8] if len(sid) > 8 else sid)
        return Session(sid=sid, is_legacy_login=is_legacy_login)

    async def _release(
        self, handle: _LoginHandle, extra: dict[str, Any]
    ) -> SynologyResponse | ConnectionFailure:
        try:
            login_result = await handle.wait()
        except Exception as exc:
            return ConnectionFailure.from_exception(exc)

        if isinstance(login_result, SynologyFailure):
            return login_result

        try:
            response = await auth.logout(
                self._transport,
                handle.settings.base_url,
                sid=login_result.sid,
                session=handle.settings.session,
                **extra,
            )
        except Exception as exc:
            logger.info("Synology logout failed: %r", exc)
            return ConnectionFailure.from_exception(exc)

        logger.info("Synology logout completed")
        return response

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; skipping background logout")
            coro.close()
            return
        task = loop.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

