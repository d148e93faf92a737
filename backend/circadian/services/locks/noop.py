"""No-op plan lock (logs only)."""
from __future__ import annotations

import logging
from uuid import UUID

from circadian.services.locks.base import PlanLock, lock_name

logger = logging.getLogger(__name__)


class NoopPlanLock(PlanLock):
    def try_acquire(self, user_id: UUID | str, ymd: str) -> bool:
        logger.debug("Plan lock (noop) acquired %s", lock_name(user_id, ymd))
        return True

    def release(self, user_id: UUID | str, ymd: str) -> None:
        logger.debug("Plan lock (noop) released %s", lock_name(user_id, ymd))
