"""Wearable-driven chronotype drift suggestions."""
from __future__ import annotations

import logging
from typing import Optional

from circadian.api.schemas.circadian import CircadianSuggestion, DerivedCircadian, WearableSummary
from circadian.services.chronotype import bias_from_midpoint, compute_caffeine_cutoff, sleep_midpoint
from circadian.services.time_utils import InvalidTimeError, parse_hhmm

logger = logging.getLogger(__name__)


def _minutes_or_none(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return parse_hhmm(value)
    except InvalidTimeError:
        logger.debug("Ignoring malformed wearable time %r", value)
        return None


def _wearable_midpoint(wearable: WearableSummary) -> Optional[int]:
    midpoint = _minutes_or_none(wearable.midpoint_local)
    if midpoint is not None:
        return midpoint
    wake = _minutes_or_none(wearable.avg_wake_local)
    onset = _minutes_or_none(wearable.avg_sleep_onset_local)
    if wake is None or onset is None:
        return None
    return sleep_midpoint(wake, onset)


def suggest_chronotype_update(
    current: DerivedCircadian,
    wearable: Optional[WearableSummary] = None,
) -> Optional[CircadianSuggestion]:
    """
    Propose a sharper chronotype when wearable sleep timing disagrees with a neutral one.

    Returns None without a stable summary. A lark or owl classification is never
    walked back or flipped by wearable data alone.
    """
    if wearable is None or not wearable.stable:
        return None

    midpoint = _wearable_midpoint(wearable)
    if midpoint is None:
        return None

    bias = bias_from_midpoint(midpoint)
    if current.chronotype != "neutral" or bias == "neutral":
        return None

    logger.info("Chronotype drift detected: neutral -> %s (midpoint=%s min)", bias, midpoint)
    has_wake = _minutes_or_none(wearable.avg_wake_local) is not None
    has_onset = _minutes_or_none(wearable.avg_sleep_onset_local) is not None
    return CircadianSuggestion(
        reason="midpoint_shift",
        suggested_chronotype=bias,
        suggested_wake=wearable.avg_wake_local if has_wake else None,
        suggested_bed=wearable.avg_sleep_onset_local if has_onset else None,
    )


def apply_suggestion(current: DerivedCircadian, suggestion: CircadianSuggestion) -> DerivedCircadian:
    """Recompute the derived profile after the user accepts a suggestion."""
    wake_time = suggestion.suggested_wake or current.wake_time
    bedtime = suggestion.suggested_bed or current.bedtime
    return DerivedCircadian(
        chronotype=suggestion.suggested_chronotype,
        wake_time=wake_time,
        bedtime=bedtime,
        caffeine_cutoff=compute_caffeine_cutoff(bedtime),
        shift_work=current.shift_work,
    )
