"""Tunable constants for the circadian scheduler."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


def _band_offsets() -> Dict[str, Dict[str, int]]:
    # Minutes after wake, per chronotype.
    return {
        "morning": {"lark": 0, "neutral": 30, "owl": 45},
        "midday": {"lark": 240, "neutral": 270, "owl": 300},
        "afternoon": {"lark": 360, "neutral": 420, "owl": 480},
    }


def _evening_offsets() -> Dict[str, int]:
    # Minutes before bedtime, per chronotype.
    return {"lark": 240, "neutral": 210, "owl": 180}


def _pillar_default_slots() -> Dict[str, str]:
    return {
        "sleep": "evening",
        "breathwork": "morning",
        "movement": "morning",
        "mindset": "morning",
        "nutrition": "midday",
    }


def _availability_centers() -> Dict[str, int]:
    # Minutes after wake; evening is resolved against bedtime instead.
    return {"morning": 45, "midday": 270, "afternoon": 420}


@dataclass(frozen=True)
class SchedulerConfig:
    band_offsets: Dict[str, Dict[str, int]] = field(default_factory=_band_offsets)
    evening_offsets_from_bed: Dict[str, int] = field(default_factory=_evening_offsets)
    min_morning_offset: int = 15
    pillar_default_slots: Dict[str, str] = field(default_factory=_pillar_default_slots)

    wind_down_pattern: str = r"wind[- ]?down|digital sunset|pre[- ]?sleep|prebed"
    pre_sleep_pattern: str = r"pre[- ]?sleep|prebed"
    wind_down_before_bed: int = 90
    pre_sleep_before_bed: int = 60
    sleep_evening_before_bed: int = 180
    sleep_default_before_bed: int = 120
    sleep_floor: str = "18:00"

    midday_anchor: str = "12:00"
    nutrition_evening_before_bed: int = 180

    default_morning_after_wake: int = 30
    default_afternoon_after_wake: int = 420
    default_before_bed: int = 120
    movement_latest: str = "20:00"

    availability_centers: Dict[str, int] = field(default_factory=_availability_centers)
    evening_availability_floor: str = "18:30"
    evening_availability_before_bed: int = 180
    availability_target_weight: int = 3

    bed_buffer: int = 30
    collision_step: int = 15


DEFAULT_SCHEDULER_CONFIG = SchedulerConfig()
