"""
Local calendar date resolution.

The game day is the observer's local calendar date, never the UTC date. A zone
can be passed explicitly (the HTTP layer passes the client's declared zone);
otherwise the configured default or the host's local zone applies.
"""

from __future__ import annotations

import os
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dayguess.core.errors import ValidationError


def resolve_timezone(name: Optional[str]) -> Optional[ZoneInfo]:
    """Map an IANA zone name to a ZoneInfo; None/blank means host local."""
    if name is None or not name.strip():
        return None
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown timezone: {name}") from e


def _host_zone_name() -> str:
    env_tz = os.environ.get("TZ", "").lstrip(":")
    if env_tz:
        return env_tz
    try:
        target = str(Path("/etc/localtime").resolve())
    except OSError:
        target = ""
    marker = "zoneinfo/"
    if marker in target:
        return target.split(marker, 1)[1]
    return datetime.now().astimezone().tzname() or "UTC"


def local_timezone_name(tz: Optional[tzinfo] = None) -> str:
    """Best available IANA name for ``tz`` (or the host zone)."""
    if tz is None:
        return _host_zone_name()
    key = getattr(tz, "key", None)
    if key:
        return key
    return datetime.now(tz).tzname() or "UTC"


def _localize(now: Optional[datetime], tz: Optional[tzinfo]) -> datetime:
    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is None:
        # naive input is already local wall-clock time
        return now if tz is None else now.replace(tzinfo=tz)
    return now.astimezone(tz)


def local_date(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> date:
    return _localize(now, tz).date()


def current_local_date(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> str:
    """Return today's local calendar date as ``YYYY-MM-DD``."""
    return local_date(now, tz).isoformat()


def time_until_next_day(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> timedelta:
    """Time left until the next local midnight, DST aware."""
    local_now = _localize(now, tz)
    next_midnight = datetime.combine(local_now.date() + timedelta(days=1), time.min)

    if local_now.tzinfo is None:
        return next_midnight - local_now
    if tz is not None:
        next_midnight = next_midnight.replace(tzinfo=tz)
    else:
        next_midnight = next_midnight.astimezone()
    # compare in UTC; same-tzinfo subtraction ignores offset changes
    return next_midnight.astimezone(timezone.utc) - local_now.astimezone(timezone.utc)


def format_countdown(remaining: timedelta) -> str:
    """HH:MM:SS, clamped to 00:00:00 outside (0, 24h)."""
    total_ms = int(remaining.total_seconds() * 1000)
    if total_ms <= 0 or total_ms >= 24 * 60 * 60 * 1000:
        return "00:00:00"
    total_seconds = total_ms // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
