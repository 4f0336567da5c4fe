"""Parsing of Jira timestamps and human-friendly relative times."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_TIMESTAMP = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d{1,9}))?"
    r"(Z|[+-]\d{2}:\d{2}|[+-]\d{4})"
)

# A timestamp that cannot be parsed counts as the zero instant, and elapsed
# time is capped at the largest span a signed 64-bit nanosecond count holds.
_ZERO_INSTANT = datetime(1, 1, 1, tzinfo=timezone.utc)
_MAX_ELAPSED = timedelta(microseconds=(2**63 - 1) // 1000)


def parse_timestamp(time_str: str) -> datetime | None:
    """Parse a Jira or RFC 3339 timestamp; return None if it is not one."""
    match = _TIMESTAMP.fullmatch(time_str)
    if match is None:
        return None
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    if offset != "Z" and ":" not in offset and (fraction is None or len(fraction) != 3):
        return None

    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        digits = offset[1:].replace(":", "")
        delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        try:
            tz = timezone(sign * delta)
        except ValueError:
            return None

    microsecond = int((fraction or "0")[:6].ljust(6, "0"))
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second),
            microsecond, tzinfo=tz,
        )
    except ValueError:
        return None


def _plural(count: int, unit: str) -> str:
    if count == 1:
        return f"1 {unit} ago"
    return f"{count} {unit}s ago"


def format_relative_time(time_str: str, now: datetime | None = None) -> str:
    """Describe how long ago *time_str* was, e.g. ``"3 days ago"``."""
    moment = parse_timestamp(time_str) or _ZERO_INSTANT
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.astimezone()

    elapsed = now - moment
    elapsed = max(-_MAX_ELAPSED, min(_MAX_ELAPSED, elapsed))
    total = elapsed.total_seconds()

    seconds = int(total)
    minutes = int(total / 60)
    hours = int(total / 3600)
    days = int(total / 3600 / 24)
    weeks = days // 7
    months = days // 30
    years = days // 365

    if seconds < 60:
        if seconds <= 1:
            return "just now"
        return f"{seconds} seconds ago"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    if weeks < 4:
        return _plural(weeks, "week")
    if months < 12:
        return _plural(months, "month")
    return _plural(years, "year")