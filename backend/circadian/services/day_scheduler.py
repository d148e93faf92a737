"""Deterministic day scheduler: abstract tasks in, collision-free UTC instants out."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Set, Tuple

from circadian.api.schemas.plan import (
    CircadianInputs,
    DayPlan,
    DayTask,
    PlanPayload,
    ScheduledDayPlan,
    ScheduledPlanPayload,
    ScheduledTask,
)
from circadian.services.scheduling_config import DEFAULT_SCHEDULER_CONFIG, SchedulerConfig
from circadian.services.slot_resolver import DayWindow, resolve_target
from circadian.services.time_utils import add_minutes, at_local, clamp, next_iso_day, to_utc_iso

logger = logging.getLogger(__name__)


class ScheduleCapacityError(ValueError):
    """Raised when a day's window has no free slot left for a task."""


def build_day_window(
    date_iso: str,
    inputs: CircadianInputs,
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
) -> DayWindow:
    """Anchor wake and bed for the day; a bedtime at or before wake rolls to the next day."""
    wake = at_local(date_iso, inputs.wake_time, inputs.tz)
    bed = at_local(date_iso, inputs.bedtime, inputs.tz)
    if bed <= wake:
        bed = at_local(next_iso_day(date_iso), inputs.bedtime, inputs.tz)
    return DayWindow(
        date=date_iso,
        tz=inputs.tz,
        wake=wake,
        bed=bed,
        end=add_minutes(bed, -config.bed_buffer),
    )


def _place(
    candidates: List[Tuple[DayTask, datetime]],
    window: DayWindow,
    config: SchedulerConfig,
) -> List[Tuple[DayTask, datetime]]:
    ordered = sorted(candidates, key=lambda candidate: candidate[1])
    seen: Set[datetime] = set()
    placed: List[Tuple[DayTask, datetime]] = []
    for task, target in ordered:
        slot = target
        while slot in seen:
            nudged = clamp(add_minutes(slot, config.collision_step), window.start, window.end)
            if nudged == slot:
                raise ScheduleCapacityError(
                    f"No free slot for {task.title!r} on {window.date}: window ends at {to_utc_iso(window.end)}"
                )
            slot = nudged
        if slot != target:
            logger.debug("Nudged %r on %s from %s to %s", task.title, window.date, target, slot)
        seen.add(slot)
        placed.append((task, slot))
    return placed


def schedule_day(
    day: DayPlan,
    inputs: CircadianInputs,
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
) -> ScheduledDayPlan:
    """
    Assign every task of the day a distinct instant inside ``[wake, bed - buffer]``.

    Tasks are ordered by their resolved target (ties keep input order) and
    collisions push the later task forward one step at a time. Tasks come back in
    scheduled order. Malformed times, dates or zones raise.
    """
    window = build_day_window(day.date, inputs, config)
    candidates = [
        (task, clamp(resolve_target(task, window, inputs, config), window.start, window.end))
        for task in day.tasks
    ]
    placed = _place(candidates, window, config)
    return ScheduledDayPlan(
        date=day.date,
        reflection_prompt=day.reflection_prompt,
        tasks=[ScheduledTask(**task.model_dump(), scheduled_at=to_utc_iso(slot)) for task, slot in placed],
    )


def map_tasks_to_times(
    plan: PlanPayload,
    inputs: CircadianInputs,
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
) -> ScheduledPlanPayload:
    """Schedule every day of the plan, returning a new payload; the input is left untouched."""
    return ScheduledPlanPayload(
        title=plan.title,
        description=plan.description,
        days=[schedule_day(day, inputs, config) for day in plan.days],
    )
