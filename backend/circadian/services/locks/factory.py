"""Plan lock factory."""
from __future__ import annotations

from functools import lru_cache

from circadian.core.config import settings
from circadian.db.session import new_session
from circadian.services.locks.advisory import AdvisoryPlanLock
from circadian.services.locks.base import PlanLock
from circadian.services.locks.memory import InMemoryPlanLock
from circadian.services.locks.noop import NoopPlanLock


@lru_cache
def get_plan_lock() -> PlanLock:
    provider = settings.plan_lock_provider.lower()
    if provider == "advisory":
        return AdvisoryPlanLock(new_session)
    if provider == "noop":
        return NoopPlanLock()
    return InMemoryPlanLock()
