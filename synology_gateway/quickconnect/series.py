"""Sequential fallback over a list of inputs."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class SeriesExhaustedError(Exception):
    """Raised when every attempt in :func:`series` failed.

    Attributes:
        message: A human-readable description.
        errors: The exception raised by each attempt, in order.
    """

    def __init__(self, message: str, errors: list[Exception] | None = None) -> None:
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)


async def series(
    values: Sequence[T],
    attempt: Callable[[T], Awaitable[U]],
    default: U | None = None,
) -> U:
    """Try *attempt* on each value in order and return the first success.

    Attempts never overlap: the next one starts only after the previous
    one raised.  *values* is not modified.

    Args:
        values: Inputs, in order of preference.
        attempt: Coroutine function; raising means "try the next value".
        default: Returned when *values* is empty.

    Raises:
        SeriesExhaustedError: If *values* is empty and there is no
            *default*, or if every attempt raised.
    """
    if not values:
        if default is None:
            raise SeriesExhaustedError("no values were given for series")
        return default

    errors: list[Exception] = []
    for index, value in enumerate(values):
        try:
            return await attempt(value)
        except Exception as exc:
            logger.debug("Attempt %d/%d failed: %s", index + 1, len(values), exc)
            errors.append(exc)

    raise SeriesExhaustedError(f"all {len(values)} attempts failed", errors) from errors[-1]
