"""Per-(deal, user) locks that serialize vote requests."""

import asyncio
import uuid
import weakref


class VoteLockRegistry:
    """Hands out one asyncio.Lock per (deal, user) pair.

    Locks live in a WeakValueDictionary keyed by (deal_id, user_id), so an
    entry disappears once no request is holding or waiting on it.
    """

    def __init__(self) -> None:
        self._locks = weakref.WeakValueDictionary()

    def lock_for(self, deal_id: uuid.UUID, user_id: uuid.UUID) -> asyncio.Lock:
        key = (deal_id, user_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


# Process-wide registry shared by all requests
vote_locks = VoteLockRegistry()


def get_vote_locks() -> VoteLockRegistry:
    """FastAPI dependency returning the shared lock registry."""
    return vote_locks
