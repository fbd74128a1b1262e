# @TASK P1-T1.4 - SynologyClient facade tests
# @TEST tests/test_client.py

"""Tests for the SynologyClient facade.

The DSM side is the FakeDsm from conftest.py plus per-test handlers for
the proxied API calls.
"""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from synology_gateway import (
    NOT_LOGGED_IN,
    ApiClientSettings,
    ConnectionFailure,
    Session,
    Settings,
    SynologyClient,
    SynologyFailure,
    SynologySuccess,
)
from synology_gateway.quickconnect import (
    ConnectionCandidate,
    ConnectionType,
    QuickConnectClient,
    QuickConnectResolutionError,
)


@pytest.fixture
def client(api_settings, transport) -> SynologyClient:
    return SynologyClient(api_settings, transport)


def _serve_entry(fake_dsm, transport, handler):
    """Route non-auth GETs to *handler*, auth/query to FakeDsm."""

    async def get(base_url, cgi, request, timeout=None, referer=None):
        if cgi in ("query", "auth"):
            return await fake_dsm.get(base_url, cgi, request, timeout, referer)
        return handler(base_url, cgi, request)

    transport.get.side_effect = get


# ---------------------------------------------------------------------------
# 1. Proxied API groups
# ---------------------------------------------------------------------------


class TestProxiedGroups:
    @pytest.mark.asyncio
    async def test_task_list_logs_in_and_injects_sid(self, client, transport, fake_dsm):
        seen = []

        def handler(base_url, cgi, request):
            seen.append((base_url, cgi, request))
            return SynologySuccess({"tasks": [], "total": 0})

        _serve_entry(fake_dsm, transport, handler)

        result = await client.download_station.task.list(additional=["transfer"])

        assert result == SynologySuccess({"tasks": [], "total": 0})
        base_url, cgi, request = seen[0]
        assert base_url == "http://localhost:5000"
        assert cgi == "DownloadStation/task"
        assert request["sid"] == "sid-1"
        assert request["additional"] == "transfer"

    @pytest.mark.asyncio
    async def test_expired_session_is_renewed(self, client, transport, fake_dsm):
        responses = [SynologyFailure(code=106), SynologySuccess({"shares": []})]
        sids = []

        def handler(base_url, cgi, request):
            sids.append(request["sid"])
            return responses.pop(0)

        _serve_entry(fake_dsm, transport, handler)

        result = await client.file_station.list.list_share()

        assert result == SynologySuccess({"shares": []})
        assert sids == ["sid-1", "sid-2"]

    @pytest.mark.asyncio
    async def test_invalid_argument_becomes_unknown_failure(self, client):
        """Proxied methods never raise; argument errors are returned too."""
        result = await client.file_station.list.list(folder_path="../etc")

        assert isinstance(result, ConnectionFailure)
        assert result.type == "unknown"

    @pytest.mark.asyncio
    async def test_missing_config(self, transport):
        client = SynologyClient(ApiClientSettings(base_url="http://nas:5000"), transport)

        result = await client.download_station.info.getinfo()

        assert result == ConnectionFailure.missing_config()


# ---------------------------------------------------------------------------
# 2. Auth and settings
# ---------------------------------------------------------------------------


class TestAuthAndSettings:
    @pytest.mark.asyncio
    async def test_login_logout(self, client, fake_dsm):
        assert await client.auth.login() == Session(sid="sid-1")
        assert await client.auth.logout() == SynologySuccess({})
        assert await client.auth.logout() == NOT_LOGGED_IN

    def test_update_settings(self, client, api_settings):
        calls = []
        client.on_settings_change(lambda: calls.append(client.settings))

        assert client.update_settings(replace(api_settings, account="admin")) is True
        assert client.settings_version == 1
        assert calls == [replace(api_settings, account="admin")]

    def test_settings_listener_disposer(self, client, api_settings):
        calls = []
        dispose = client.on_settings_change(lambda: calls.append(True))

        dispose()
        client.update_settings(replace(api_settings, account="admin"))

        assert calls == []

    def test_from_env(self):
        settings = Settings(
            SYNOLOGY_URL="https://nas.local:5001/",
            SYNOLOGY_USER="admin",
            SYNOLOGY_PASSWORD="pw",
            SYNOLOGY_SESSION="FileStation",
        )

        client = SynologyClient.from_env(settings)

        assert client.settings == ApiClientSettings("https://nas.local:5001", "admin", "pw", "FileStation")


# ---------------------------------------------------------------------------
# 3. QuickConnect
# ---------------------------------------------------------------------------


class TestConnectViaQuickConnect:
    @pytest.fixture
    def quickconnect(self) -> AsyncMock:
        return AsyncMock(spec=QuickConnectClient)

    @pytest.mark.asyncio
    async def test_resolved_address_becomes_base_url(self, client, quickconnect, api_settings, monkeypatch):
        resolve = AsyncMock(
            return_value=ConnectionCandidate(hostname="192.168.1.10", port=5001, type=ConnectionType.LAN_IPV4)
        )
        monkeypatch.setattr("synology_gateway.client.QuickConnectResolver.resolve", resolve)

        base_url = await client.connect_via_quickconnect("my-nas", "https", quickconnect=quickconnect)

        assert base_url == "https://192.168.1.10:5001"
        assert client.settings == replace(api_settings, base_url="https://192.168.1.10:5001")
        assert client.settings_version == 1

    @pytest.mark.asyncio
    async def test_failure_leaves_settings_alone(self, client, quickconnect, api_settings, monkeypatch):
        resolve = AsyncMock(side_effect=QuickConnectResolutionError("nothing reachable"))
        monkeypatch.setattr("synology_gateway.client.QuickConnectResolver.resolve", resolve)

        with pytest.raises(QuickConnectResolutionError):
            await client.connect_via_quickconnect("my-nas", quickconnect=quickconnect)

        assert client.settings == api_settings
        assert client.settings_version == 0


# ---------------------------------------------------------------------------
# 4. Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager_logs_out_and_closes(self, api_settings, transport, fake_dsm):
        async with SynologyClient(api_settings, transport) as client:
            await client.auth.login()

        assert len(fake_dsm.requests("logout")) == 1
        transport.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_context_manager_without_login(self, api_settings, transport, fake_dsm):
        async with SynologyClient(api_settings, transport):
            pass

        assert fake_dsm.calls == []
        transport.close.assert_awaited_once()
