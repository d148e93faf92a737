"""Process-local plan lock."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Set
from uuid import UUID

from circadian.services.locks.base import PlanLock, lock_name

logger = logging.getLogger(__name__)


class InMemoryPlanLock(PlanLock):
    """Lock held in this process only; suitable for a single worker or tests."""

    def __init__(self) -> None:
        self._held: Set[str] = set()
        self._guard = Lock()

    def try_acquire(self, user_id: UUID | str, ymd: str) -> bool:
        name = lock_name(user_id, ymd)
        with self._guard:
            if name in self._held:
                logger.info("Plan lock busy %s", name)
                return False
            self._held.add(name)
        return True

    def release(self, user_id: UUID | str, ymd: str) -> None:
        with self._guard:
            self._held.discard(lock_name(user_id, ymd))
