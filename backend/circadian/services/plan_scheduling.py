"""Plan scheduling for a user: day lock, scheduling, and the unscheduled fallback."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from circadian.api.schemas.plan import CircadianInputs, DayPlan, PlanPayload
from circadian.observability.metrics import log_metric
from circadian.observability.tracing import annotate, trace
from circadian.services.day_scheduler import map_tasks_to_times
from circadian.services.locks.base import PlanLock
from circadian.services.scheduling_config import DEFAULT_SCHEDULER_CONFIG, SchedulerConfig

logger = logging.getLogger(__name__)


@dataclass
class PlanSchedulingResult:
    plan: PlanPayload
    scheduled: bool
    lock_acquired: bool
    error: Optional[str] = None


def normalize_plan_dates(plan: PlanPayload, start_date: date) -> PlanPayload:
    """Renumber day dates consecutively from ``start_date``, keeping day order."""
    days = [
        DayPlan(
            date=(start_date + timedelta(days=index)).isoformat(),
            tasks=list(day.tasks),
            reflection_prompt=day.reflection_prompt,
        )
        for index, day in enumerate(plan.days)
    ]
    return PlanPayload(title=plan.title, description=plan.description, days=days)


def schedule_plan_for_user(
    plan: PlanPayload,
    inputs: CircadianInputs,
    *,
    user_id: UUID,
    lock: PlanLock,
    request_id: str | None = None,
    config: SchedulerConfig = DEFAULT_SCHEDULER_CONFIG,
) -> PlanSchedulingResult:
    """
    Schedule a plan while holding the user's lock for the plan's first day.

    Scheduling errors (bad times, dates, zones, or an overfull day) do not fail the
    call: the plan is returned as given with ``scheduled=False`` so the caller can
    persist it without instants.
    """
    lock_day = plan.days[0].date if plan.days else None
    acquired = lock.try_acquire(user_id, lock_day) if lock_day else False
    if lock_day and not acquired:
        logger.info("Scheduling plan for user=%s day=%s without lock", user_id, lock_day)

    metadata = {
        "days": len(plan.days),
        "tasks": sum(len(day.tasks) for day in plan.days),
        "chronotype": inputs.chronotype,
        "tz": inputs.tz,
        "availability": inputs.availability,
        "lock_acquired": acquired,
    }
    try:
        with trace("plan.schedule", metadata=metadata, user_id=str(user_id), request_id=request_id) as span:
            scheduled = map_tasks_to_times(plan, inputs, config)
            annotate(span, first_instant=_first_instant(scheduled))
    except (ValueError, KeyError) as exc:
        logger.warning("Scheduling failed for user=%s, keeping plan unscheduled: %s", user_id, exc)
        log_metric("plan.schedule.fallback", 1, metadata={"user_id": str(user_id), "error": type(exc).__name__})
        return PlanSchedulingResult(plan=plan, scheduled=False, lock_acquired=acquired, error=str(exc))
    finally:
        if acquired:
            lock.release(user_id, lock_day)

    log_metric("plan.schedule.success", 1, metadata={"user_id": str(user_id)})
    return PlanSchedulingResult(plan=scheduled, scheduled=True, lock_acquired=acquired)


def _first_instant(plan: PlanPayload) -> Optional[str]:
    for day in plan.days:
        for task in day.tasks:
            return getattr(task, "scheduled_at", None)
    return None
