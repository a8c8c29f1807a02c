from __future__ import annotations

from datetime import date as Date
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 date or timestamp into an aware UTC datetime.

    Accepts `2024-06-01`, `2024-06-01T00:00:00`, `...Z` and explicit offsets.
    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, Date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat()


def nights_between(check_in: datetime, check_out: datetime) -> int:
    # Whole days, partial days dropped.
    return (check_out - check_in).days


def _interval(booking: Any) -> tuple[datetime, datetime] | None:
    if isinstance(booking, Mapping):
        raw_in, raw_out = booking.get("checkIn"), booking.get("checkOut")
    else:
        raw_in, raw_out = getattr(booking, "checkIn", None), getattr(booking, "checkOut", None)
    start, end = parse_timestamp(raw_in), parse_timestamp(raw_out)
    if start is None or end is None:
        return None
    return start, end


def is_available(existing_bookings: Iterable[Any], proposed_start: datetime, proposed_end: datetime) -> bool:
    """
    True unless a booking's [checkIn, checkOut) overlaps [proposed_start, proposed_end).

    Stays that touch (one's checkOut equals the other's checkIn) do not
    overlap. The caller guarantees proposed_end > proposed_start.
    """
    start = parse_timestamp(proposed_start)
    end = parse_timestamp(proposed_end)
    if start is None or end is None:
        raise TypeError("proposed_start and proposed_end must be dates or datetimes")
    for booking in existing_bookings:
        interval = _interval(booking)
        if interval is None:
            continue
        existing_start, existing_end = interval
        if start < existing_end and end > existing_start:
            return False
    return True
