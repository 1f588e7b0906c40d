"""In-memory read/dismiss state, keyed by (subject_id, kind).

Dismissals belong to the caller, not the engine.  The store hands the
engine a frozen snapshot of the keys on each evaluation; the engine itself
stays pure.

An asyncio.Lock guards all mutations so concurrent request handlers never
corrupt state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from case_alerts.domain.notification import DismissalKey

logger = logging.getLogger(__name__)


class DismissalStore:
    """Async-safe set of dismissed notification keys."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._keys: set[DismissalKey] = set()

    async def dismiss(self, key: DismissalKey) -> None:
        async with self._lock:
            self._keys.add(key)
        logger.debug("Dismissed %s/%s", key[0], key[1].value)

    async def restore(self, key: DismissalKey) -> bool:
        """Un-dismiss *key*.  Returns False if it was not dismissed."""
        async with self._lock:
            if key not in self._keys:
                return False
            self._keys.discard(key)
            return True

    async def is_dismissed(self, key: DismissalKey) -> bool:
        async with self._lock:
            return key in self._keys

    async def snapshot(self) -> frozenset[DismissalKey]:
        async with self._lock:
            return frozenset(self._keys)

    async def prune(self, active_keys: Iterable[DismissalKey]) -> int:
        """Forget dismissals whose notification no longer fires.

        A payment follow-up dismissed today should come back if the same
        client gets a new reminder date next month, so keys that dropped out
        of the latest evaluation are released.  Returns how many were removed.
        """
        active = set(active_keys)
        async with self._lock:
            stale = self._keys - active
            self._keys -= stale
        if stale:
            logger.info("Pruned %d stale dismissal(s)", len(stale))
        return len(stale)

    async def clear(self) -> None:
        async with self._lock:
            self._keys.clear()

    async def count(self) -> int:
        async with self._lock:
            return len(self._keys)
