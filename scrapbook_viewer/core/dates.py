from __future__ import annotations
from datetime import datetime, timezone, tzinfo
from typing import Optional


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def seconds_ago(dt: datetime, now: Optional[datetime] = None) -> float:
    return (_now(now) - dt).total_seconds()


def minutes_ago(dt: datetime, now: Optional[datetime] = None) -> float:
    return seconds_ago(dt, now) / 60


def hours_ago(dt: datetime, now: Optional[datetime] = None) -> float:
    return minutes_ago(dt, now) / 60


def days_ago(dt: datetime, now: Optional[datetime] = None) -> float:
    return hours_ago(dt, now) / 24


def weeks_ago(dt: datetime, now: Optional[datetime] = None) -> float:
    return days_ago(dt, now) / 7


def relative_format(dt: datetime, now: Optional[datetime] = None) -> str:
    '''Short relative form: "12 sec. ago", "5 min. ago", "3 hr. ago", "in 2 min."'''
    delta = seconds_ago(dt, now)
    future = delta < 0
    seconds = int(abs(delta))
    if seconds < 60:
        amount, unit = seconds, "sec."
    elif seconds < 3600:
        amount, unit = seconds // 60, "min."
    elif seconds < 86400:
        amount, unit = seconds // 3600, "hr."
    else:
        amount, unit = seconds // 86400, "days" if seconds >= 2 * 86400 else "day"
    return f"in {amount} {unit}" if future else f"{amount} {unit} ago"


def scrapbook_format(dt: datetime, now: Optional[datetime] = None,
                     tz: Optional[tzinfo] = None) -> str:
    """Timeline date: relative within the last 24 hours, "MMM d" otherwise.

    The calendar day is taken in ``tz``, the local zone when omitted.
    """
    if hours_ago(dt, now) >= 24:
        local = dt.astimezone(tz)
        return f"{local:%b} {local.day}"
    return relative_format(dt, now)
