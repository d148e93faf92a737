"""Plan scheduling endpoint."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, Request

from circadian.api.schemas.plan import SchedulePlanRequest, SchedulePlanResponse
from circadian.observability.metrics import log_metric
from circadian.services.locks.base import PlanLock
from circadian.services.locks.factory import get_plan_lock
from circadian.services.plan_scheduling import normalize_plan_dates, schedule_plan_for_user

router = APIRouter()


@router.post(
    "/planning/schedule",
    response_model=SchedulePlanResponse,
    response_model_exclude_none=True,
    tags=["planning"],
)
def planning_schedule(
    request: Request,
    payload: SchedulePlanRequest,
    lock: PlanLock = Depends(get_plan_lock),
) -> SchedulePlanResponse:
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()

    plan = payload.plan
    if payload.start_date:
        plan = normalize_plan_dates(plan, payload.start_date)

    result = schedule_plan_for_user(
        plan,
        payload.inputs,
        user_id=payload.user_id,
        lock=lock,
        request_id=request_id,
    )

    latency_ms = (perf_counter() - start) * 1000
    log_metric("planning.schedule.latency_ms", latency_ms, metadata={"user_id": str(payload.user_id)})
    return SchedulePlanResponse(
        user_id=payload.user_id,
        plan=result.plan,
        scheduled=result.scheduled,
        lock_acquired=result.lock_acquired,
        error=result.error,
        request_id=request_id or "",
    )
