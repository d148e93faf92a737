"""PostgreSQL advisory-lock backed plan lock."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, Dict
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from circadian.services.locks.base import PlanLock, lock_key, lock_name

logger = logging.getLogger(__name__)


class AdvisoryPlanLock(PlanLock):
    """
    Session-level ``pg_try_advisory_lock`` keyed by a hash of the user and day.

    Advisory locks belong to the database connection, so the session that took the
    lock is kept open until ``release`` unlocks it on the same connection.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._sessions: Dict[int, Session] = {}
        self._guard = Lock()

    def try_acquire(self, user_id: UUID | str, ymd: str) -> bool:
        key = lock_key(user_id, ymd)
        session = self._session_factory()
        try:
            acquired = bool(session.execute(select(func.pg_try_advisory_lock(key))).scalar())
        except SQLAlchemyError as exc:
            logger.warning("Advisory lock %s unavailable, continuing without it: %s", lock_name(user_id, ymd), exc)
            session.close()
            return False

        if not acquired:
            session.close()
            logger.info("Advisory lock busy %s", lock_name(user_id, ymd))
            return False

        with self._guard:
            self._sessions[key] = session
        return True

    def release(self, user_id: UUID | str, ymd: str) -> None:
        key = lock_key(user_id, ymd)
        with self._guard:
            session = self._sessions.pop(key, None)
        if session is None:
            return
        try:
            session.execute(select(func.pg_advisory_unlock(key)))
        except SQLAlchemyError:
            logger.debug("Failed to release advisory lock %s", lock_name(user_id, ymd), exc_info=True)
        finally:
            session.close()
