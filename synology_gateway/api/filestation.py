"""Synology File Station API groups.

- ``SYNO.FileStation.Info`` -- ``get``
- ``SYNO.FileStation.List`` -- ``list_share``, ``list``, ``getinfo``

Path validation is enforced on ``list`` and ``getinfo`` to prevent path
traversal.  All paths must be absolute (start with ``/``) and must not
contain ``..`` segments.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from synology_gateway.api.base import SynologyApi, join_fields, join_list


def validate_path(path: str) -> bool:
    """Validate a Synology file path.

    Rules:
    - Must not be empty or whitespace-only.
    - Must start with ``/`` (absolute path).
    - Must not contain ``..`` as a path segment.
    """
    if not path or not path.strip():
        return False

    stripped = path.strip()
    if not stripped.startswith("/"):
        return False

    return all(segment != ".." for segment in stripped.split("/"))


def _ensure_valid_path(path: str) -> None:
    if not validate_path(path):
        raise ValueError(
            f"Invalid path: {path!r}. "
            "Path must be absolute (start with '/') and must not contain '..' segments."
        )


_join_additional = join_fields("additional")


def _preprocess_list(options: dict[str, Any]) -> dict[str, Any]:
    _ensure_valid_path(options.get("folder_path", ""))
    return _join_additional(options)


def _preprocess_getinfo(options: dict[str, Any]) -> dict[str, Any]:
    paths = options.get("path") or []
    if isinstance(paths, str):
        paths = [paths]
    if not paths:
        raise ValueError("getinfo requires at least one path")
    for path in paths:
        _ensure_valid_path(path)
    return {**_join_additional(options), "path": join_list(list(paths))}


_info_api = SynologyApi("entry", "SYNO.FileStation.Info")
_list_api = SynologyApi("entry", "SYNO.FileStation.List")

Info = SimpleNamespace(
    get=_info_api.make_get("get"),
)

List = SimpleNamespace(
    list_share=_list_api.make_get("list_share", _join_additional),
    list=_list_api.make_get("list", _preprocess_list),
    getinfo=_list_api.make_get("getinfo", _preprocess_getinfo),
)
