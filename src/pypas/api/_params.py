"""Small helpers for building vault request URLs, queries and bodies."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Union
from urllib.parse import quote

from pypas.exceptions import InvalidUsageError


def escape(value: Any) -> str:
    """Escape one URL path segment (safe names, app IDs, usernames)."""
    return quote(str(value), safe="")


def bound(**kwargs: Any) -> dict[str, Any]:
    """Keep only the arguments that were supplied (not ``None``)."""
    return {key: value for key, value in kwargs.items() if value is not None}


def build_filter(*clauses: Optional[str]) -> Optional[str]:
    """Join filter clauses with `` AND ``; ``None`` when there are none."""
    present = [c for c in clauses if c]
    return " AND ".join(present) if present else None


def join_sort(sort: Union[str, Iterable[str], None]) -> Optional[str]:
    if sort is None or isinstance(sort, str):
        return sort
    return ",".join(sort)


def to_epoch(value: Union[datetime, int, None], milliseconds: bool = False) -> Optional[int]:
    """Convert a datetime to Unix epoch seconds (or ms); ints pass through.

    Naive datetimes are taken as UTC.
    """
    if value is None or isinstance(value, int):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    seconds = value.timestamp()
    return int(seconds * 1000) if milliseconds else int(seconds)


def choose(value: Optional[str], allowed: Iterable[str], name: str) -> Optional[str]:
    """Validate *value* against *allowed* (case-insensitive), returning the canonical spelling."""
    if value is None:
        return None
    options = list(allowed)
    for option in options:
        if option.lower() == value.lower():
            return option
    raise InvalidUsageError(f"Invalid {name} '{value}'; expected one of: {', '.join(options)}")
