"""Shared helper functions used across the checks and the pipeline."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC ``datetime``."""
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as an ISO 8601 string with a ``Z`` suffix.

    Naive datetimes are assumed to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_position(value: Any) -> bool:
    """Return ``True`` if *value* looks like a coordinate position ``[x, y, ...]``."""
    return (
        isinstance(value, list | tuple)
        and len(value) > 0
        and isinstance(value[0], int | float)
        and not isinstance(value[0], bool)
    )


def iter_positions(coords: Any) -> Iterator[Any]:
    """Yield every leaf position of a nested GeoJSON coordinate array.

    Walks with an explicit stack of iterators, so nesting depth is bounded
    by memory rather than by the recursion limit.
    """
    stack = [iter([coords])]
    while stack:
        for value in stack[-1]:
            if is_position(value):
                yield value
            elif isinstance(value, list | tuple):
                stack.append(iter(value))
                break
        else:
            stack.pop()
