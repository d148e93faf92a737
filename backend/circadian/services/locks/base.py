"""Per-user, per-day plan lock interface."""
from __future__ import annotations

from uuid import UUID

FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3
_MASK_64 = (1 << 64) - 1


def fnv1a_64(value: str) -> int:
    """64-bit FNV-1a over the UTF-16 code units of ``value``."""
    digest = FNV_OFFSET_BASIS
    encoded = value.encode("utf-16-le")
    for index in range(0, len(encoded), 2):
        digest ^= encoded[index] | (encoded[index + 1] << 8)
        digest = (digest * FNV_PRIME) & _MASK_64
    return digest


def lock_name(user_id: UUID | str, ymd: str) -> str:
    return f"plan:{user_id}:{ymd}"


def lock_key(user_id: UUID | str, ymd: str) -> int:
    """Signed 64-bit key suitable for PostgreSQL advisory locks."""
    digest = fnv1a_64(lock_name(user_id, ymd))
    return digest - (1 << 64) if digest >= (1 << 63) else digest


class PlanLock:
    """
    Best-effort mutual exclusion for planning one user's day.

    ``try_acquire`` never blocks; a False result means another worker may be
    planning the same day and the caller proceeds anyway, relying on an
    idempotent upsert downstream.
    """

    def try_acquire(self, user_id: UUID | str, ymd: str) -> bool:
        raise NotImplementedError

    def release(self, user_id: UUID | str, ymd: str) -> None:
        raise NotImplementedError
