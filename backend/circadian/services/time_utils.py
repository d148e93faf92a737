"""Timezone-aware wall-clock helpers shared by the circadian services.

Local times travel as ``HH:MM`` strings and calendar days as ``YYYY-MM-DD``
strings; every instant produced here is a UTC-aware ``datetime``.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60
QUARTER_HOUR = 15

HHMM_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"
_HHMM_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


class InvalidTimeError(ValueError):
    """Raised when a wall-clock string is not a valid 24h ``HH:MM`` value."""


def parse_hhmm(value: str) -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    match = _HHMM_RE.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeError(f"Invalid time: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def to_hhmm(total_minutes: int) -> str:
    minutes = ((total_minutes % MINUTES_PER_DAY) + MINUTES_PER_DAY) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_bed_minutes(wake_min: int, bed_min: int) -> int:
    """Place a bedtime earlier than the wake time on the following day."""
    return bed_min + MINUTES_PER_DAY if bed_min < wake_min else bed_min


def at_local(date_iso: str, hhmm: str, tz: str) -> datetime:
    """
    Return the UTC instant that reads as ``date_iso hhmm`` on a wall clock in ``tz``.

    Resolution follows ``fold=0``: an ambiguous fall-back time maps to its first
    occurrence, and a time skipped by a spring-forward gap is read with the
    pre-transition offset, which lands it the gap's width after the jump.
    """
    day = date.fromisoformat(date_iso)
    minutes = parse_hhmm(hhmm)
    local = datetime.combine(day, time(minutes // 60, minutes % 60, fold=0), tzinfo=ZoneInfo(tz))
    return local.astimezone(timezone.utc)


def add_minutes(moment: datetime, minutes: float) -> datetime:
    return moment + timedelta(minutes=minutes)


def round_to_quarter(moment: datetime) -> datetime:
    """Snap to the nearest quarter hour using the minute field; seconds are dropped."""
    rounded = (moment.minute + 7) // QUARTER_HOUR * QUARTER_HOUR
    return moment.replace(minute=0, second=0, microsecond=0) + timedelta(minutes=rounded)


def clamp(moment: datetime, lower: datetime, upper: datetime) -> datetime:
    if moment < lower:
        return lower
    if moment > upper:
        return upper
    return moment


def next_iso_day(date_iso: str) -> str:
    return (date.fromisoformat(date_iso) + timedelta(days=1)).isoformat()


def to_utc_iso(moment: datetime) -> str:
    """Render an instant as RFC 3339 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
