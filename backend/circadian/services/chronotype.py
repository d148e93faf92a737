"""Chronotype derivation from the onboarding screener."""
from __future__ import annotations

from circadian.api.schemas.circadian import Chronotype, DerivedCircadian, Screener
from circadian.services.time_utils import MINUTES_PER_DAY, normalize_bed_minutes, parse_hhmm, to_hhmm

CAFFEINE_CUTOFF_BEFORE_BED_MIN = 8 * 60

# Midpoint bands, minutes after local midnight.
LARK_BAND_START = 1 * 60
LARK_BAND_END = 3 * 60
OWL_BAND_START = 6 * 60

SELF_ID_CHRONOTYPES: dict[str, Chronotype] = {
    "morning": "lark",
    "evening": "owl",
}


def sleep_midpoint(wake_min: int, bed_min: int) -> int:
    """Clock minute halfway from wake to the (possibly next-day) bedtime."""
    bed_norm = normalize_bed_minutes(wake_min, bed_min)
    return (wake_min + (bed_norm - wake_min) // 2) % MINUTES_PER_DAY


def bias_from_midpoint(mid_min: int) -> Chronotype:
    if LARK_BAND_START <= mid_min <= LARK_BAND_END:
        return "lark"
    if mid_min >= OWL_BAND_START:
        return "owl"
    return "neutral"


def derive_chronotype(screener: Screener) -> Chronotype:
    """
    Classify the screener as lark, neutral or owl.

    A morning or evening self-report decides outright. Only "neither" falls
    through to the midpoint bands.
    """
    reported = SELF_ID_CHRONOTYPES.get(screener.self_id)
    if reported:
        return reported
    wake = parse_hhmm(screener.wake_time)
    bed = parse_hhmm(screener.bedtime)
    return bias_from_midpoint(sleep_midpoint(wake, bed))


def compute_caffeine_cutoff(bedtime: str) -> str:
    return to_hhmm(parse_hhmm(bedtime) - CAFFEINE_CUTOFF_BEFORE_BED_MIN)


def build_derived_circadian(screener: Screener) -> DerivedCircadian:
    return DerivedCircadian(
        chronotype=derive_chronotype(screener),
        wake_time=screener.wake_time,
        bedtime=screener.bedtime,
        caffeine_cutoff=compute_caffeine_cutoff(screener.bedtime),
        shift_work=bool(screener.shift_work),
    )
