"""Synology Download Station (v1) API groups.

- ``SYNO.DownloadStation.Info``      -- ``getinfo``, ``getconfig``, ``setserverconfig``
- ``SYNO.DownloadStation.Schedule``  -- ``getconfig``, ``setconfig``
- ``SYNO.DownloadStation.Statistic`` -- ``getinfo``
- ``SYNO.DownloadStation.Task``      -- ``list``, ``getinfo``, ``create``, ``delete``,
  ``pause``, ``resume``, ``edit``
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from synology_gateway.api.base import SynologyApi, join_fields, join_list
from synology_gateway.responses import SynologyResponse
from synology_gateway.transport import FormFile, SynologyTransport

TASK_CGI_NAME = "DownloadStation/task"
TASK_API_NAME = "SYNO.DownloadStation.Task"

_info_api = SynologyApi("DownloadStation/info", "SYNO.DownloadStation.Info")
_schedule_api = SynologyApi("DownloadStation/schedule", "SYNO.DownloadStation.Schedule")
_statistic_api = SynologyApi("DownloadStation/statistic", "SYNO.DownloadStation.Statistic")
_task_api = SynologyApi(TASK_CGI_NAME, TASK_API_NAME)


async def _task_create(
    transport: SynologyTransport,
    base_url: str,
    sid: str,
    uri: list[str] | None = None,
    file: FormFile | None = None,
    timeout: float | None = None,
    referer: str | None = None,
    **options: Any,
) -> SynologyResponse:
    """Create download tasks from URIs (GET) or from an uploaded file (POST)."""
    if file is not None and uri:
        raise ValueError("cannot specify both a file and a uri argument to create")

    request: dict[str, Any] = {
        **options,
        "api": TASK_API_NAME,
        "version": 1,
        "method": "create",
        "sid": sid,
    }

    if file is not None:
        return await transport.post(
            base_url, TASK_CGI_NAME, {**request, "file": file}, timeout=timeout, referer=referer
        )
    return await transport.get(
        base_url, TASK_CGI_NAME, {**request, "uri": join_list(uri)}, timeout=timeout, referer=referer
    )


_join_additional = join_fields("additional")
_join_id = join_fields("id")
_join_id_and_additional = join_fields("id", "additional")

Info = SimpleNamespace(
    getinfo=_info_api.make_get("getinfo"),
    getconfig=_info_api.make_get("getconfig"),
    setserverconfig=_info_api.make_get("setserverconfig"),
)

Schedule = SimpleNamespace(
    getconfig=_schedule_api.make_get("getconfig"),
    setconfig=_schedule_api.make_get("setconfig"),
)

Statistic = SimpleNamespace(
    getinfo=_statistic_api.make_get("getinfo"),
)

Task = SimpleNamespace(
    list=_task_api.make_get("list", _join_additional),
    getinfo=_task_api.make_get("getinfo", _join_id_and_additional),
    create=_task_create,
    delete=_task_api.make_get("delete", _join_id),
    pause=_task_api.make_get("pause", _join_id),
    resume=_task_api.make_get("resume", _join_id),
    edit=_task_api.make_get("edit", _join_id),
)
