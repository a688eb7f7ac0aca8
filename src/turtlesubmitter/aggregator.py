"""Coalescing store for the latest sighting of each monster instance."""

from __future__ import annotations

import asyncio
import dataclasses
import logging

from .models import Sighting, SightingKey

logger = logging.getLogger(__name__)


class SightingAggregator:
    """Latest known sighting per (monster, instance), with a pending flag.

    The ingestion task calls ``update`` for every parsed sighting and the
    flush task calls ``flush_if_pending`` on a fixed cadence. Both go through
    one lock; the mapping itself is never handed out, only copies of it.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._sightings: dict[SightingKey, Sighting] = {}
        self._pending = False

    async def update(self, sighting: Sighting) -> None:
        """Store a sighting, replacing any earlier one with the same key."""
        if sighting.instance < 1:
            raise ValueError(f"Instance must be 1 or greater, got {sighting.instance}")

        async with self._lock:
            self._sightings[sighting.key] = sighting
            self._pending = True

        logger.debug(f"Tracking {sighting.name} instance {sighting.instance}")

    async def flush_if_pending(self) -> list[Sighting] | None:
        """Take a snapshot if anything changed since the last flush.

        Returns:
            Independent copies of every tracked sighting, or None when no
            update arrived since the previous flush.
        """
        async with self._lock:
            if not self._pending:
                return None
            self._pending = False
            return [dataclasses.replace(s) for s in self._sightings.values()]

    @property
    def pending(self) -> bool:
        return self._pending

    def __len__(self) -> int:
        return len(self._sightings)
