"""Discriminated DSM Web API responses.

Every DSM endpoint answers with either ``{"success": true, "data": ...}``
or ``{"success": false, "error": {"code": ..., "errors": [...]}}``.
These two shapes are modelled as :class:`SynologySuccess` and
:class:`SynologyFailure` so callers can branch with ``isinstance`` or
``match`` instead of poking at raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SynologySuccess:
    """A successful DSM reply.

    Attributes:
        data: The ``data`` payload (an empty dict when the API sent none).
    """

    data: dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class SynologyFailure:
    """A well-formed error reply from the device.

    Attributes:
        code: The numeric Synology error code.
        errors: Optional per-item error details sent alongside the code.
    """

    code: int
    errors: list[Any] | None = None

    @property
    def success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"Synology API error (code: {self.code})"


SynologyResponse = SynologySuccess | SynologyFailure


def parse_synology_response(payload: Any) -> SynologyResponse:
    """Convert a decoded DSM JSON body into a :data:`SynologyResponse`.

    Raises:
        ValueError: If *payload* is not a DSM response envelope.
    """
    if not isinstance(payload, dict) or "success" not in payload:
        raise ValueError(f"Unexpected DSM response body: {payload!r}")

    if payload["success"]:
        return SynologySuccess(data=payload.get("data") or {})

    error = payload.get("error") or {}
    return SynologyFailure(code=int(error.get("code", 0)), errors=error.get("errors"))
