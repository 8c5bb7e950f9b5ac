"""Datetime helpers."""

from __future__ import annotations

import math

import pendulum

SECONDS_PER_DAY = 86400


def utc_now() -> pendulum.DateTime:
    return pendulum.now("UTC")


def parse_timestamp(value: str | None) -> pendulum.DateTime | None:
    """Parse an API timestamp such as ``2024-01-15T08:00:00+0000``.

    Returns ``None`` for missing or unparseable values.
    """
    if not value:
        return None
    try:
        parsed = pendulum.parse(value, strict=False)
    except (ValueError, OverflowError):
        return None
    if isinstance(parsed, pendulum.DateTime):
        return parsed
    if isinstance(parsed, pendulum.Date):
        return pendulum.datetime(parsed.year, parsed.month, parsed.day, tz="UTC")
    return None


def whole_days_between(start: pendulum.DateTime, end: pendulum.DateTime) -> int:
    elapsed = (end - start).total_seconds()
    return math.floor(elapsed / SECONDS_PER_DAY)


def isoformat_utc(value: pendulum.DateTime | None = None) -> str:
    moment = value or utc_now()
    return moment.in_timezone("UTC").format("YYYY-MM-DD[T]HH:mm:ss.SSS[Z]")
