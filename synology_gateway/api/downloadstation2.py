"""``SYNO.DownloadStation2.Task`` -- the newer task creation endpoint."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Literal

from synology_gateway.api.base import join_list
from synology_gateway.responses import SynologyResponse
from synology_gateway.transport import FormFile, SynologyTransport

TASK_API_NAME = "SYNO.DownloadStation2.Task"
TASK_CGI_NAME = "entry"


async def _task_create(
    transport: SynologyTransport,
    base_url: str,
    sid: str,
    type: Literal["url", "file", "local"],
    url: list[str] | None = None,
    file: FormFile | None = None,
    local_path: str | None = None,
    destination: str | None = None,
    create_list: bool = False,
    timeout: float | None = None,
    referer: str | None = None,
    **options: Any,
) -> SynologyResponse:
    """Create tasks from URLs, an uploaded torrent file, or a path on the NAS.

    This API wants JSON-encoded scalar fields.  An empty destination means
    the default location configured on the NAS.
    """
    request: dict[str, Any] = {
        **options,
        "type": json.dumps(type),
        "destination": json.dumps(destination or ""),
        "create_list": json.dumps(create_list),
        "api": TASK_API_NAME,
        "version": 2,
        "method": "create",
        "sid": sid,
    }

    if type == "file":
        if file is None:
            raise ValueError('type "file" requires a file argument')
        return await transport.post(
            base_url,
            TASK_CGI_NAME,
            {**request, "file": json.dumps(["torrent"]), "torrent": file},
            timeout=timeout,
            referer=referer,
        )
    if type == "url":
        return await transport.get(
            base_url, TASK_CGI_NAME, {**request, "url": join_list(url)}, timeout=timeout, referer=referer
        )
    if type == "local":
        return await transport.get(
            base_url, TASK_CGI_NAME, {**request, "local_path": local_path}, timeout=timeout, referer=referer
        )
    raise ValueError(f'illegal type "{type}"')


Task = SimpleNamespace(
    create=_task_create,
)
