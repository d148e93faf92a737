"""Ideal-time resolution for a single task within a scheduled day."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from circadian.api.schemas.plan import CircadianInputs, DayTask
from circadian.services.scheduling_config import DEFAULT_SCHEDULER_CONFIG, SchedulerConfig
from circadian.services.time_utils import add_minutes, at_local, clamp, round_to_quarter


@dataclass(frozen=True)
class DayWindow:
    """Wake/bed anchors for one calendar day, as UTC instants."""

    date: str
    tz: str
    wake: datetime
    bed: datetime
    end: datetime

    @property
    def start(self) -> datetime:
        return self.wake

    def at(self, hhmm: str) -> datetime:
        """Wall-clock time on this window's calendar day in the user's zone."""
        return at_local(self.date, hhmm, self.tz)


@lru_cache(maxsize=32)
def _compiled(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def _resolve_sleep(task: DayTask, slot: str, window: DayWindow, config: SchedulerConfig) -> datetime:
    title = task.title.lower()
    if _compiled(config.wind_down_pattern).search(title):
        return round_to_quarter(add_minutes(window.bed, -config.wind_down_before_bed))

    floor = window.at(config.sleep_floor)
    if _compiled(config.pre_sleep_pattern).search(title):
        target = add_minutes(window.bed, -config.pre_sleep_before_bed)
    else:
        before_bed = config.sleep_evening_before_bed if slot == "evening" else config.sleep_default_before_bed
        target = max(add_minutes(window.bed, -before_bed), floor)
    return round_to_quarter(clamp(target, floor, window.end))


def _resolve_nutrition(
    task: DayTask, slot: str, window: DayWindow, inputs: CircadianInputs, config: SchedulerConfig
) -> datetime:
    if not task.time_suggestion:
        target = window.at(config.midday_anchor)
    elif slot in config.band_offsets:
        target = add_minutes(window.wake, config.band_offsets[slot][inputs.chronotype])
    else:
        target = add_minutes(window.bed, -config.nutrition_evening_before_bed)
    return round_to_quarter(target)


def _resolve_general(
    task: DayTask, slot: str, window: DayWindow, inputs: CircadianInputs, config: SchedulerConfig
) -> datetime:
    chronotype = inputs.chronotype
    if slot == "morning":
        offset = max(config.min_morning_offset, config.band_offsets["morning"][chronotype])
        target = add_minutes(window.wake, offset)
    elif slot in ("midday", "afternoon"):
        target = add_minutes(window.wake, config.band_offsets[slot][chronotype])
    elif slot == "evening":
        target = add_minutes(window.bed, -config.evening_offsets_from_bed[chronotype])
    else:
        default = config.pillar_default_slots[task.type]
        if default == "morning":
            target = add_minutes(window.wake, config.default_morning_after_wake)
        elif default == "midday":
            target = window.at(config.midday_anchor)
        elif default == "afternoon":
            target = add_minutes(window.wake, config.default_afternoon_after_wake)
        else:
            target = add_minutes(window.bed, -config.default_before_bed)

    if task.type == "movement":
        target = clamp(target, window.start, window.at(config.movement_latest))
    return round_to_quarter(target)


def availability_center(window: DayWindow, availability: str, config: SchedulerConfig) -> datetime:
    if availability in config.availability_centers:
        return add_minutes(window.wake, config.availability_centers[availability])
    floor = window.at(config.evening_availability_floor)
    preferred = add_minutes(window.bed, -config.evening_availability_before_bed)
    return floor if preferred < floor else preferred


def _blends_with_availability(task: DayTask, inputs: CircadianInputs) -> bool:
    return (
        task.type != "sleep"
        and task.time_suggestion in (None, "flexible")
        and bool(inputs.availability)
        and inputs.availability != "flexible"
    )


def resolve_target(
    task: DayTask,
    window: DayWindow,
    inputs: CircadianInputs,
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
) -> datetime:
    """
    Return the task's ideal instant before it is clamped into the day window.

    Sleep tasks key off bedtime (with a wind-down sub-band picked from the title),
    nutrition anchors to noon or to wake-relative bands, and every other pillar uses
    the chronotype offset table. Hint-less tasks are then pulled a quarter of the
    way toward the user's stated availability.
    """
    slot = task.time_suggestion or config.pillar_default_slots[task.type]

    if task.type == "sleep":
        target = _resolve_sleep(task, slot, window, config)
    elif task.type == "nutrition":
        target = _resolve_nutrition(task, slot, window, inputs, config)
    else:
        target = _resolve_general(task, slot, window, inputs, config)

    if _blends_with_availability(task, inputs):
        center = availability_center(window, inputs.availability, config)
        weight = config.availability_target_weight
        target = round_to_quarter(target + (center - target) / (weight + 1))
    return target
