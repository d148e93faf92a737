from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from circadian.services.time_utils import (
    InvalidTimeError,
    at_local,
    clamp,
    next_iso_day,
    normalize_bed_minutes,
    parse_hhmm,
    round_to_quarter,
    to_hhmm,
    to_utc_iso,
)


def _utc(year, month, day, hour, minute=0, second=0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.mark.parametrize("value,expected", [("00:00", 0), ("07:30", 450), ("23:59", 1439), ("19:05", 1145)])
def test_parse_hhmm_valid(value, expected) -> None:
    assert parse_hhmm(value) == expected


@pytest.mark.parametrize("value", ["24:00", "7:30", "07:60", "07:30\n", "", "0730", "07:30:00", " 07:30"])
def test_parse_hhmm_rejects_malformed(value) -> None:
    with pytest.raises(InvalidTimeError):
        parse_hhmm(value)


def test_invalid_time_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_hhmm("25:00")


@pytest.mark.parametrize(
    "minutes,expected",
    [(0, "00:00"), (450, "07:30"), (-30, "23:30"), (1440 + 75, "01:15"), (-2 * 1440 - 1, "23:59")],
)
def test_to_hhmm_wraps_into_day(minutes, expected) -> None:
    assert to_hhmm(minutes) == expected


def test_normalize_bed_minutes_rolls_past_midnight() -> None:
    assert normalize_bed_minutes(420, 60) == 1500
    assert normalize_bed_minutes(420, 1380) == 1380
    assert normalize_bed_minutes(420, 420) == 420


def test_at_local_utc_is_identity() -> None:
    assert at_local("2024-01-15", "07:00", "UTC") == _utc(2024, 1, 15, 7)


@pytest.mark.parametrize(
    "date_iso,hhmm,tz,expected",
    [
        ("2024-01-15", "07:00", "America/New_York", _utc(2024, 1, 15, 12)),
        ("2024-07-01", "07:00", "America/New_York", _utc(2024, 7, 1, 11)),
        ("2024-03-10", "07:00", "America/New_York", _utc(2024, 3, 10, 11)),
        ("2024-03-10", "06:00", "America/New_York", _utc(2024, 3, 10, 10)),
        ("2024-11-03", "07:00", "America/New_York", _utc(2024, 11, 3, 12)),
        ("2024-07-01", "07:00", "Europe/Lisbon", _utc(2024, 7, 1, 6)),
        ("2024-01-15", "07:00", "Asia/Kolkata", _utc(2024, 1, 15, 1, 30)),
        ("2024-04-07", "06:00", "Australia/Sydney", _utc(2024, 4, 6, 20)),
    ],
)
def test_at_local_resolves_zone_offsets_and_dst(date_iso, hhmm, tz, expected) -> None:
    assert at_local(date_iso, hhmm, tz) == expected


@pytest.mark.parametrize(
    "date_iso,tz",
    [
        ("2024-03-10", "America/New_York"),
        ("2024-11-03", "America/New_York"),
        ("2024-03-31", "Europe/Lisbon"),
        ("2024-10-27", "Europe/Lisbon"),
        ("2024-04-07", "Australia/Sydney"),
        ("2024-10-06", "Australia/Sydney"),
    ],
)
@pytest.mark.parametrize("hhmm", ["00:00", "05:45", "06:30", "12:00", "18:00", "23:45"])
def test_at_local_reads_back_as_the_intended_wall_clock(date_iso, tz, hhmm) -> None:
    local = at_local(date_iso, hhmm, tz).astimezone(ZoneInfo(tz))
    assert local.date().isoformat() == date_iso
    assert local.strftime("%H:%M") == hhmm


@pytest.mark.parametrize(
    "date_iso,hhmm,tz,expected",
    [
        ("2024-11-03", "01:30", "America/New_York", _utc(2024, 11, 3, 5, 30)),
        ("2024-10-27", "01:30", "Europe/Lisbon", _utc(2024, 10, 27, 0, 30)),
        ("2024-04-07", "02:30", "Australia/Sydney", _utc(2024, 4, 6, 15, 30)),
    ],
)
def test_at_local_ambiguous_time_takes_first_occurrence(date_iso, hhmm, tz, expected) -> None:
    assert at_local(date_iso, hhmm, tz) == expected


@pytest.mark.parametrize(
    "date_iso,hhmm,tz,expected,local_hhmm",
    [
        ("2024-03-10", "02:30", "America/New_York", _utc(2024, 3, 10, 7, 30), "03:30"),
        ("2024-03-10", "02:00", "America/New_York", _utc(2024, 3, 10, 7, 0), "03:00"),
        ("2024-03-31", "01:30", "Europe/Lisbon", _utc(2024, 3, 31, 1, 30), "02:30"),
        ("2024-10-06", "02:15", "Australia/Sydney", _utc(2024, 10, 5, 16, 15), "03:15"),
    ],
)
def test_at_local_skipped_time_lands_after_the_gap(date_iso, hhmm, tz, expected, local_hhmm) -> None:
    instant = at_local(date_iso, hhmm, tz)

    assert instant == expected
    assert instant.astimezone(ZoneInfo(tz)).strftime("%H:%M") == local_hhmm


def test_at_local_unknown_zone_raises() -> None:
    with pytest.raises(ZoneInfoNotFoundError):
        at_local("2024-01-15", "07:00", "Mars/Olympus_Mons")


def test_at_local_invalid_date_raises() -> None:
    with pytest.raises(ValueError):
        at_local("2024-02-30", "07:00", "UTC")


def test_at_local_invalid_time_raises() -> None:
    with pytest.raises(InvalidTimeError):
        at_local("2024-01-15", "7:00", "UTC")


@pytest.mark.parametrize(
    "moment,expected",
    [
        (_utc(2024, 1, 15, 7, 7), _utc(2024, 1, 15, 7, 0)),
        (_utc(2024, 1, 15, 7, 8), _utc(2024, 1, 15, 7, 15)),
        (_utc(2024, 1, 15, 7, 52, 59), _utc(2024, 1, 15, 7, 45)),
        (_utc(2024, 1, 15, 7, 53), _utc(2024, 1, 15, 8, 0)),
        (_utc(2024, 1, 15, 23, 55), _utc(2024, 1, 16, 0, 0)),
        (_utc(2024, 1, 15, 7, 30, 45), _utc(2024, 1, 15, 7, 30)),
    ],
)
def test_round_to_quarter(moment, expected) -> None:
    assert round_to_quarter(moment) == expected


def test_clamp() -> None:
    low, high = _utc(2024, 1, 15, 7), _utc(2024, 1, 15, 22)
    assert clamp(_utc(2024, 1, 15, 6), low, high) == low
    assert clamp(_utc(2024, 1, 15, 23), low, high) == high
    assert clamp(_utc(2024, 1, 15, 12), low, high) == _utc(2024, 1, 15, 12)


def test_next_iso_day_crosses_month_and_year() -> None:
    assert next_iso_day("2024-02-28") == "2024-02-29"
    assert next_iso_day("2023-02-28") == "2023-03-01"
    assert next_iso_day("2024-12-31") == "2025-01-01"


def test_to_utc_iso_uses_z_suffix() -> None:
    assert to_utc_iso(_utc(2024, 1, 15, 7, 30)) == "2024-01-15T07:30:00.000Z"
    eastern = datetime(2024, 1, 15, 7, 30, tzinfo=ZoneInfo("America/New_York"))
    assert to_utc_iso(eastern) == "2024-01-15T12:30:00.000Z"
