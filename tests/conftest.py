# @TASK P1-T1.1 - SessionManager / RequestProxy fixtures
import asyncio
import os
from unittest.mock import AsyncMock

import pytest

# Set test environment variables before importing package modules
os.environ.setdefault("SYNOLOGY_URL", "http://localhost:5000")
os.environ.setdefault("SYNOLOGY_USER", "testuser")
os.environ.setdefault("SYNOLOGY_PASSWORD", "testpassword")

from synology_gateway.config import ApiClientSettings  # noqa: E402
from synology_gateway.constants import SessionName  # noqa: E402
from synology_gateway.responses import SynologySuccess  # noqa: E402
from synology_gateway.session import SessionManager  # noqa: E402
from synology_gateway.transport import SynologyTransport  # noqa: E402


class FakeDsm:
    """In-memory stand-in for the DSM endpoints the session layer talks to.

    ``query.cgi`` advertises ``auth_max_version``; ``auth.cgi`` logins pop
    ``login_results`` (responses or exceptions) and otherwise hand out
    ``sid-1``, ``sid-2``, ...  Every request is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.auth_max_version = 6
        self.login_results: list = []
        self.logout_result: object = SynologySuccess({})
        self.calls: list[tuple[str, str, dict]] = []
        self._issued = 0

    async def get(self, base_url, cgi, request, timeout=None, referer=None):
        self.calls.append((base_url, cgi, dict(request)))
        await asyncio.sleep(0)

        if cgi == "query":
            return SynologySuccess({"SYNO.API.Auth": {"minVersion": 1, "maxVersion": self.auth_max_version}})

        if cgi == "auth" and request["method"] == "login":
            if self.login_results:
                result = self.login_results.pop(0)
                if isinstance(result, Exception):
                    raise result
                return result
            self._issued += 1
            return SynologySuccess({"sid": f"sid-{self._issued}"})

        if cgi == "auth" and request["method"] == "logout":
            if isinstance(self.logout_result, Exception):
                raise self.logout_result
            return self.logout_result

        raise AssertionError(f"unexpected request: {cgi} {request}")

    def requests(self, method: str) -> list[tuple[str, str, dict]]:
        return [call for call in self.calls if call[2].get("method") == method]


@pytest.fixture
def api_settings() -> ApiClientSettings:
    """Fully configured settings matching the test env-vars."""
    return ApiClientSettings(
        base_url="http://localhost:5000",
        account="testuser",
        passwd="testpassword",
        session=SessionName.DOWNLOAD_STATION,
    )


@pytest.fixture
def fake_dsm() -> FakeDsm:
    return FakeDsm()


@pytest.fixture
def transport(fake_dsm: FakeDsm) -> AsyncMock:
    """A mocked SynologyTransport whose `.get()` is served by FakeDsm."""
    mock = AsyncMock(spec=SynologyTransport)
    mock.get.side_effect = fake_dsm.get
    return mock


@pytest.fixture
def session_manager(api_settings: ApiClientSettings, transport: AsyncMock) -> SessionManager:
    return SessionManager(api_settings, transport)
