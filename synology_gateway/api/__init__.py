"""DSM Web API groups, each method callable as ``(transport, base_url, sid, **options)``."""

from synology_gateway.api import auth, downloadstation, downloadstation2, filestation, info

__all__ = ["auth", "downloadstation", "downloadstation2", "filestation", "info"]
