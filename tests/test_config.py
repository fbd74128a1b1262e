# @TASK P1-T1.2 - Settings and connection failure tests
# @TEST tests/test_config.py

"""Tests for Settings, ApiClientSettings and ConnectionFailure."""

from dataclasses import replace

import httpx
import pytest

from synology_gateway.config import ApiClientSettings, Settings
from synology_gateway.constants import SessionName
from synology_gateway.errors import ConnectionFailure, ConnectionFailureType, is_connection_failure


def _request() -> httpx.Request:
    return httpx.Request("GET", "http://localhost:5000/webapi/entry.cgi")


# ---------------------------------------------------------------------------
# 1. Settings
# ---------------------------------------------------------------------------


class TestSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SYNOLOGY_URL", "https://nas.local:5001")
        monkeypatch.setenv("SYNOLOGY_SESSION", "FileStation")
        monkeypatch.setenv("SYNOLOGY_TIMEOUT", "15")
        monkeypatch.setenv("QUICKCONNECT_DOMAIN", "quickconnect.cn")

        settings = Settings()

        assert settings.SYNOLOGY_URL == "https://nas.local:5001"
        assert settings.SYNOLOGY_SESSION is SessionName.FILE_STATION
        assert settings.SYNOLOGY_TIMEOUT == 15.0
        assert settings.SYNOLOGY_VERIFY_SSL is False
        assert settings.QUICKCONNECT_DOMAIN == "quickconnect.cn"

    def test_blank_values_become_unset(self):
        settings = Settings(SYNOLOGY_URL="", SYNOLOGY_USER="", SYNOLOGY_PASSWORD="")

        api_settings = ApiClientSettings.from_settings(settings)

        assert api_settings.base_url is None
        assert api_settings.is_fully_configured() is False


# ---------------------------------------------------------------------------
# 2. ApiClientSettings
# ---------------------------------------------------------------------------


class TestApiClientSettings:
    def test_fully_configured(self, api_settings):
        assert api_settings.is_fully_configured() is True

    @pytest.mark.parametrize("field", ["base_url", "account", "passwd", "session"])
    def test_missing_field(self, api_settings, field):
        assert replace(api_settings, **{field: None}).is_fully_configured() is False
        assert replace(api_settings, **{field: ""}).is_fully_configured() is False

    def test_differs_from(self, api_settings):
        assert api_settings.differs_from(None) is True
        assert api_settings.differs_from(replace(api_settings)) is False
        assert api_settings.differs_from(replace(api_settings, session=SessionName.FILE_STATION)) is True

    def test_session_name_equals_plain_string(self, api_settings):
        assert api_settings.differs_from(replace(api_settings, session="DownloadStation")) is False

    def test_repr_masks_password(self, api_settings):
        text = repr(api_settings)

        assert "testpassword" not in text
        assert "***" in text


# ---------------------------------------------------------------------------
# 3. ConnectionFailure classification
# ---------------------------------------------------------------------------


class TestConnectionFailure:
    def test_bad_request_is_wrong_protocol(self):
        request = _request()
        error = httpx.HTTPStatusError("400", request=request, response=httpx.Response(400, request=request))

        assert ConnectionFailure.from_exception(error).type is ConnectionFailureType.PROBABLE_WRONG_PROTOCOL

    def test_other_status_is_unknown(self):
        request = _request()
        error = httpx.HTTPStatusError("502", request=request, response=httpx.Response(502, request=request))

        assert ConnectionFailure.from_exception(error).type is ConnectionFailureType.UNKNOWN

    @pytest.mark.parametrize(
        "error, expected",
        [
            (httpx.ConnectTimeout("slow"), ConnectionFailureType.TIMEOUT),
            (httpx.ReadTimeout("slow"), ConnectionFailureType.TIMEOUT),
            (httpx.ConnectError("refused"), ConnectionFailureType.PROBABLE_WRONG_URL_OR_NO_CONNECTION_OR_CERT_ERROR),
            (httpx.RemoteProtocolError("eof"), ConnectionFailureType.PROBABLE_WRONG_URL_OR_NO_CONNECTION_OR_CERT_ERROR),
            (ValueError("bad json"), ConnectionFailureType.UNKNOWN),
        ],
    )
    def test_exception_mapping(self, error, expected):
        failure = ConnectionFailure.from_exception(error)

        assert failure.type is expected
        assert failure.error is error

    def test_missing_config(self):
        failure = ConnectionFailure.missing_config()

        assert failure.type == "missing-config"
        assert failure.error is None
        assert is_connection_failure(failure)
        assert not is_connection_failure("missing-config")
