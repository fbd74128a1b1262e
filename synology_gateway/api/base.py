"""Declarative builder for DSM API methods.

A DSM API is identified by a CGI path and an API name
(e.g. ``entry`` / ``SYNO.FileStation.List``).  :class:`SynologyApi`
produces :class:`ApiMethod` objects, each an async callable with the
signature ``(transport, base_url, sid, **options)``.  Binding the
transport (``functools.partial``) yields the ``(base_url, sid, **options)``
operation that :class:`~synology_gateway.proxy.RequestProxy` wraps.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from synology_gateway.responses import SynologyResponse
from synology_gateway.transport import SynologyTransport

Preprocess = Callable[[dict[str, Any]], dict[str, Any]]


def join_list(value: Any) -> Any:
    """Join a list/tuple option with commas; empty sequences become ``None``."""
    if isinstance(value, list | tuple):
        return ",".join(str(v) for v in value) if value else None
    return value


def join_fields(*names: str) -> Preprocess:
    """Return a preprocessor that comma-joins the named list options."""

    def preprocess(options: dict[str, Any]) -> dict[str, Any]:
        return {key: join_list(value) if key in names else value for key, value in options.items()}

    return preprocess


@dataclass(frozen=True)
class ApiMethod:
    cgi: str
    api: str
    method: str
    version: int = 1
    http_method: Literal["get", "post"] = "get"
    preprocess: Preprocess | None = None

    async def __call__(
        self,
        transport: SynologyTransport,
        base_url: str,
        sid: str,
        timeout: float | None = None,
        referer: str | None = None,
        **options: Any,
    ) -> SynologyResponse:
        if self.preprocess is not None:
            options = self.preprocess(options)
        request = {
            **options,
            "api": self.api,
            "version": self.version,
            "method": self.method,
            "sid": sid,
        }
        send = transport.get if self.http_method == "get" else transport.post
        return await send(base_url, self.cgi, request, timeout=timeout, referer=referer)


class SynologyApi:
    """Factory for the methods of one DSM API.

    Args:
        cgi: CGI path below ``/webapi`` without the ``.cgi`` suffix.
        api: The DSM API name.
    """

    def __init__(self, cgi: str, api: str) -> None:
        self.cgi = cgi
        self.api = api

    def make_get(self, method: str, preprocess: Preprocess | None = None, version: int = 1) -> ApiMethod:
        return ApiMethod(self.cgi, self.api, method, version, "get", preprocess)

    def make_post(self, method: str, preprocess: Preprocess | None = None, version: int = 1) -> ApiMethod:
        return ApiMethod(self.cgi, self.api, method, version, "post", preprocess)
