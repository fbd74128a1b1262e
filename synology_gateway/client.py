"""Synology NAS API client with session management and auto-reconnection.

Composes a :class:`~synology_gateway.session.SessionManager` and a
:class:`~synology_gateway.proxy.RequestProxy` over the API groups in
:mod:`synology_gateway.api`.  It handles:

- Login / logout via ``SYNO.API.Auth`` (v4, or v1 on older DSM)
- Automatic session ID (``_sid``) injection into every request
- Transparent re-authentication when the session expires (codes 105, 106)
- Restarting in-flight calls when the settings change underneath them

Every proxied method returns a value -- ``SynologySuccess``,
``SynologyFailure`` or ``ConnectionFailure`` -- and never raises.

Usage::

    settings = ApiClientSettings(url, user, password, SessionName.DOWNLOAD_STATION)
    async with SynologyClient(settings) as client:
        tasks = await client.download_station.task.list(additional=["transfer"])
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from types import SimpleNamespace
from typing import Any

from synology_gateway.api import downloadstation, downloadstation2, filestation
from synology_gateway.config import ApiClientSettings, Settings, get_settings
from synology_gateway.proxy import RequestProxy
from synology_gateway.quickconnect import (
    Protocol,
    QuickConnectClient,
    QuickConnectResolver,
    TunnelMode,
)
from synology_gateway.session import SessionManager, SettingsListener
from synology_gateway.transport import SynologyTransport

logger = logging.getLogger(__name__)


class SynologyClient:
    """Async client for the Synology DiskStation Manager Web API.

    Args:
        settings: Connection settings; may be incomplete until
            :meth:`update_settings` fills them in.
        transport: Optional pre-built transport (mainly for tests).
    """

    def __init__(
        self,
        settings: ApiClientSettings | None = None,
        transport: SynologyTransport | None = None,
    ) -> None:
        self._transport = transport or SynologyTransport()
        self._sessions = SessionManager(settings, self._transport)
        self._proxy = RequestProxy(self._sessions)

        self.auth = SimpleNamespace(
            login=self._sessions.acquire_session,
            logout=self._sessions.release_session,
        )
        self.file_station = SimpleNamespace(
            info=self._proxy_group(filestation.Info),
            list=self._proxy_group(filestation.List),
        )
        self.download_station = SimpleNamespace(
            info=self._proxy_group(downloadstation.Info),
            schedule=self._proxy_group(downloadstation.Schedule),
            statistic=self._proxy_group(downloadstation.Statistic),
            task=self._proxy_group(downloadstation.Task),
        )
        self.download_station2 = SimpleNamespace(
            task=self._proxy_group(downloadstation2.Task),
        )

    @classmethod
    def from_env(cls, settings: Settings | None = None) -> SynologyClient:
        """Build a client from ``SYNOLOGY_*`` environment variables."""
        settings = settings or get_settings()
        transport = SynologyTransport(
            timeout=settings.SYNOLOGY_TIMEOUT,
            verify=settings.SYNOLOGY_VERIFY_SSL,
        )
        return cls(ApiClientSettings.from_settings(settings), transport)

    def _proxy_group(self, group: SimpleNamespace) -> SimpleNamespace:
        return SimpleNamespace(
            **{
                name: self._proxy.wrap(partial(operation, self._transport))
                for name, operation in vars(group).items()
            }
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def settings(self) -> ApiClientSettings | None:
        return self._sessions.settings

    @property
    def settings_version(self) -> int:
        return self._sessions.settings_version

    def update_settings(self, settings: ApiClientSettings) -> bool:
        return self._sessions.update_settings(settings)

    def on_settings_change(self, listener: SettingsListener) -> Callable[[], None]:
        return self._sessions.on_settings_change(listener)

    async def connect_via_quickconnect(
        self,
        quickconnect_id: str,
        protocol: Protocol | str = Protocol.HTTPS,
        tunnel: TunnelMode | str = TunnelMode.INCLUDE,
        quickconnect: QuickConnectClient | None = None,
    ) -> str:
        """Resolve *quickconnect_id* and point this client at the result.

        Returns:
            The new base URL.

        Raises:
            QuickConnectResolutionError: If no working address was found.
        """
        protocol = Protocol(protocol)
        if quickconnect is None:
            async with QuickConnectClient.from_settings() as owned:
                connection = await QuickConnectResolver(owned).resolve(quickconnect_id, protocol, tunnel)
        else:
            connection = await QuickConnectResolver(quickconnect).resolve(quickconnect_id, protocol, tunnel)

        base_url = connection.base_url(protocol)
        current = self.settings or ApiClientSettings()
        self.update_settings(
            ApiClientSettings(
                base_url=base_url,
                account=current.account,
                passwd=current.passwd,
                session=current.session,
            )
        )
        return base_url

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Wait for background logouts and dispose the transport."""
        await self._sessions.wait_background()
        await self._transport.close()

    async def __aenter__(self) -> SynologyClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit the async context: log out and close."""
        result = await self._sessions.release_session()
        logger.debug("Release on exit: %r", result)
        await self.close()
