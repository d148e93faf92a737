from __future__ import annotations

from datetime import date
from uuid import uuid4

from circadian.api.schemas.plan import CircadianInputs, DayPlan, DayTask, PlanPayload, ScheduledPlanPayload
from circadian.services import plan_scheduling
from circadian.services.locks.base import PlanLock
from circadian.services.locks.memory import InMemoryPlanLock
from circadian.services.plan_scheduling import normalize_plan_dates, schedule_plan_for_user


def _inputs(**overrides) -> CircadianInputs:
    fields = {"chronotype": "neutral", "wake_time": "07:00", "bedtime": "23:00", "tz": "UTC"}
    fields.update(overrides)
    return CircadianInputs(**fields)


def _plan(*dates: str) -> PlanPayload:
    return PlanPayload(
        title="Recovery plan",
        days=[
            DayPlan(
                date=day,
                tasks=[
                    DayTask(type="movement", title="Walk", rationale="Light cardio", time_suggestion="morning"),
                    DayTask(type="sleep", title="Digital sunset", rationale="Melatonin"),
                ],
            )
            for day in dates
        ],
    )


class _RecordingLock(PlanLock):
    def __init__(self, acquire_result: bool = True) -> None:
        self.acquire_result = acquire_result
        self.calls: list[tuple[str, str]] = []

    def try_acquire(self, user_id, ymd):
        self.calls.append(("acquire", ymd))
        return self.acquire_result

    def release(self, user_id, ymd):
        self.calls.append(("release", ymd))


def test_schedules_plan_and_releases_lock() -> None:
    lock = InMemoryPlanLock()
    user_id = uuid4()

    result = schedule_plan_for_user(_plan("2024-01-15", "2024-01-16"), _inputs(), user_id=user_id, lock=lock)

    assert result.scheduled is True
    assert result.lock_acquired is True
    assert result.error is None
    assert isinstance(result.plan, ScheduledPlanPayload)
    assert result.plan.days[1].tasks[0].scheduled_at == "2024-01-16T07:30:00.000Z"
    assert lock.try_acquire(user_id, "2024-01-15") is True


def test_lock_is_keyed_on_first_plan_day() -> None:
    lock = _RecordingLock()

    schedule_plan_for_user(_plan("2024-05-01", "2024-05-02"), _inputs(), user_id=uuid4(), lock=lock)

    assert lock.calls == [("acquire", "2024-05-01"), ("release", "2024-05-01")]


def test_busy_lock_does_not_block_scheduling() -> None:
    lock = InMemoryPlanLock()
    user_id = uuid4()
    assert lock.try_acquire(user_id, "2024-01-15")

    result = schedule_plan_for_user(_plan("2024-01-15"), _inputs(), user_id=user_id, lock=lock)

    assert result.scheduled is True
    assert result.lock_acquired is False
    assert lock.try_acquire(user_id, "2024-01-15") is False


def test_invalid_wake_time_falls_back_to_unscheduled_plan() -> None:
    lock = _RecordingLock()
    plan = _plan("2024-01-15")

    result = schedule_plan_for_user(plan, _inputs(wake_time="25:00"), user_id=uuid4(), lock=lock)

    assert result.scheduled is False
    assert result.plan is plan
    assert "Invalid time" in result.error
    assert lock.calls[-1] == ("release", "2024-01-15")


def test_unknown_timezone_falls_back_to_unscheduled_plan() -> None:
    plan = _plan("2024-01-15")

    result = schedule_plan_for_user(plan, _inputs(tz="Atlantis/Lost_City"), user_id=uuid4(), lock=InMemoryPlanLock())

    assert result.scheduled is False
    assert result.plan is plan
    assert result.error


def test_overfull_day_falls_back_and_records_metric(monkeypatch) -> None:
    recorded: list[str] = []
    monkeypatch.setattr(plan_scheduling, "log_metric", lambda name, value, metadata=None: recorded.append(name))

    result = schedule_plan_for_user(
        _plan("2024-01-15"),
        _inputs(wake_time="07:00", bedtime="07:30"),
        user_id=uuid4(),
        lock=InMemoryPlanLock(),
    )

    assert result.scheduled is False
    assert recorded == ["plan.schedule.fallback"]


def test_empty_plan_skips_lock() -> None:
    lock = _RecordingLock()

    result = schedule_plan_for_user(PlanPayload(title="Empty", days=[]), _inputs(), user_id=uuid4(), lock=lock)

    assert result.scheduled is True
    assert result.lock_acquired is False
    assert result.plan.days == []
    assert lock.calls == []


def test_normalize_plan_dates_renumbers_consecutively() -> None:
    plan = _plan("2023-12-01", "2023-12-09", "2023-12-02")

    normalized = normalize_plan_dates(plan, date(2024, 2, 28))

    assert [day.date for day in normalized.days] == ["2024-02-28", "2024-02-29", "2024-03-01"]
    assert normalized.days[0].tasks == plan.days[0].tasks
    assert [day.date for day in plan.days] == ["2023-12-01", "2023-12-09", "2023-12-02"]
