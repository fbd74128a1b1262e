"""pydantic-settings based configuration and the session settings snapshot."""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from synology_gateway.constants import (
    DEFAULT_QUICKCONNECT_DOMAIN,
    DEFAULT_QUICKCONNECT_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    SessionName,
)


class Settings(BaseSettings):
    """Gateway settings.

    All values are loaded from environment variables.
    A .env file in the working directory is also supported.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Synology NAS ---
    SYNOLOGY_URL: str = ""
    SYNOLOGY_USER: str = ""
    SYNOLOGY_PASSWORD: str = ""
    SYNOLOGY_SESSION: SessionName = SessionName.DOWNLOAD_STATION
    SYNOLOGY_TIMEOUT: float = DEFAULT_REQUEST_TIMEOUT
    SYNOLOGY_VERIFY_SSL: bool = False  # DSM ships a self-signed certificate

    # --- QuickConnect ---
    QUICKCONNECT_DOMAIN: str = DEFAULT_QUICKCONNECT_DOMAIN
    QUICKCONNECT_TIMEOUT: float = DEFAULT_QUICKCONNECT_TIMEOUT


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()


@dataclass(frozen=True)
class ApiClientSettings:
    """Immutable snapshot of what is needed to log in.

    Replaced wholesale on change and compared field by field.

    Attributes:
        base_url: NAS base URL, e.g. ``https://192.168.1.100:5001``.
        account: DSM account name.
        passwd: DSM account password.
        session: API group the session is opened for.
    """

    base_url: str | None = None
    account: str | None = None
    passwd: str | None = None
    session: SessionName | str | None = None

    def __post_init__(self) -> None:
        if self.base_url:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def __repr__(self) -> str:
        masked = "***" if self.passwd else None
        return (
            f"ApiClientSettings(base_url={self.base_url!r}, account={self.account!r}, "
            f"passwd={masked!r}, session={self.session!r})"
        )

    def is_fully_configured(self) -> bool:
        return all(value is not None and len(value) > 0 for value in astuple(self))

    def differs_from(self, other: ApiClientSettings | None) -> bool:
        if other is None:
            return True
        return any(getattr(self, f.name) != getattr(other, f.name) for f in fields(self))

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ApiClientSettings:
        settings = settings or get_settings()
        return cls(
            base_url=settings.SYNOLOGY_URL or None,
            account=settings.SYNOLOGY_USER or None,
            passwd=settings.SYNOLOGY_PASSWORD or None,
            session=settings.SYNOLOGY_SESSION,
        )
