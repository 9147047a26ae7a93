"""Epoch-millisecond timestamps and local-day arithmetic."""

from __future__ import annotations

import time as _time
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""

    return int(_time.time() * 1000)


def to_local(timestamp_ms: int, tz_name: str) -> datetime:
    """Convert an epoch-millisecond timestamp to an aware local datetime."""

    return datetime.fromtimestamp(timestamp_ms / 1000, tz=ZoneInfo(tz_name))


def local_day_bounds_ms(target_date: date, tz_name: str) -> tuple[int, int]:
    """Return [start, end) of a local calendar day in epoch milliseconds."""

    tz = ZoneInfo(tz_name)
    start = datetime.combine(target_date, time.min, tzinfo=tz)
    end = datetime.combine(target_date + timedelta(days=1), time.min, tzinfo=tz)
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)
