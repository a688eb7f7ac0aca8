"""Unit tests for aggregator.py - coalescing sighting store."""

import asyncio

import pytest

from turtlesubmitter.aggregator import SightingAggregator
from turtlesubmitter.models import Sighting


def _sighting(name: str = "Mirka", instance: int = 1, x: float = 11.4, y: float = 14.8):
    return Sighting(name=name, pos_x=x, pos_y=y, zone=397, instance=instance)


class TestSightingAggregatorUpdate:
    @pytest.mark.asyncio
    async def test_update_marks_pending(self):
        aggregator = SightingAggregator()
        assert not aggregator.pending

        await aggregator.update(_sighting())

        assert aggregator.pending
        assert len(aggregator) == 1

    @pytest.mark.asyncio
    async def test_same_key_replaces_earlier_value(self):
        aggregator = SightingAggregator()

        await aggregator.update(_sighting(x=11.4, y=14.8))
        await aggregator.update(_sighting(x=24.2, y=13.5))

        snapshot = await aggregator.flush_if_pending()
        assert snapshot == [_sighting(x=24.2, y=13.5)]

    @pytest.mark.asyncio
    async def test_instances_are_distinct_keys(self):
        aggregator = SightingAggregator()

        await aggregator.update(_sighting(instance=1))
        await aggregator.update(_sighting(instance=2))
        await aggregator.update(_sighting(name="Lyuba", instance=1))

        assert len(aggregator) == 3

    @pytest.mark.asyncio
    async def test_keys_stay_unique_over_many_updates(self):
        aggregator = SightingAggregator()
        names = ["Mirka", "Lyuba", "Bune"]

        for i in range(60):
            await aggregator.update(_sighting(name=names[i % 3], instance=i % 4 + 1, x=float(i)))

        snapshot = await aggregator.flush_if_pending()
        keys = [s.key for s in snapshot]
        assert len(keys) == len(set(keys)) == 12

    @pytest.mark.asyncio
    async def test_rejects_instance_below_one(self):
        aggregator = SightingAggregator()

        with pytest.raises(ValueError):
            await aggregator.update(_sighting(instance=0))

        assert not aggregator.pending


class TestSightingAggregatorFlush:
    @pytest.mark.asyncio
    async def test_flush_without_updates_returns_none(self):
        aggregator = SightingAggregator()
        assert await aggregator.flush_if_pending() is None

    @pytest.mark.asyncio
    async def test_flush_then_clear(self):
        aggregator = SightingAggregator()
        await aggregator.update(_sighting())

        first = await aggregator.flush_if_pending()
        second = await aggregator.flush_if_pending()

        assert first == [_sighting()]
        assert not aggregator.pending
        assert second is None

    @pytest.mark.asyncio
    async def test_flush_keeps_state_for_next_cycle(self):
        """Flushing clears the flag, not the tracked sightings."""
        aggregator = SightingAggregator()
        await aggregator.update(_sighting(name="Mirka"))
        await aggregator.flush_if_pending()

        await aggregator.update(_sighting(name="Lyuba"))
        snapshot = await aggregator.flush_if_pending()

        assert {s.name for s in snapshot} == {"Mirka", "Lyuba"}

    @pytest.mark.asyncio
    async def test_snapshot_is_independent_copy(self):
        aggregator = SightingAggregator()
        original = _sighting()
        await aggregator.update(original)

        snapshot = await aggregator.flush_if_pending()
        snapshot[0].pos_x = 999.0
        snapshot.clear()

        await aggregator.update(_sighting(name="Lyuba"))
        again = await aggregator.flush_if_pending()
        assert _sighting() in again

    @pytest.mark.asyncio
    async def test_update_during_flush_waits_for_lock(self):
        """An update that starts while the lock is held lands in the next cycle."""
        aggregator = SightingAggregator()
        await aggregator.update(_sighting(name="Mirka"))

        async with aggregator._lock:
            pending_update = asyncio.create_task(aggregator.update(_sighting(name="Lyuba")))
            await asyncio.sleep(0)
            assert not pending_update.done()

        await pending_update
        snapshot = await aggregator.flush_if_pending()
        assert {s.name for s in snapshot} == {"Mirka", "Lyuba"}

    @pytest.mark.asyncio
    async def test_concurrent_updates_and_flushes(self):
        aggregator = SightingAggregator()
        seen: set[tuple[str, int]] = set()

        async def ingest():
            for i in range(50):
                await aggregator.update(_sighting(name=f"Mob{i % 5}", instance=i % 3 + 1))
                await asyncio.sleep(0)

        async def flush():
            for _ in range(50):
                snapshot = await aggregator.flush_if_pending()
                if snapshot:
                    keys = [s.key for s in snapshot]
                    assert len(keys) == len(set(keys))
                    seen.update(keys)
                await asyncio.sleep(0)

        await asyncio.gather(ingest(), flush())
        final = await aggregator.flush_if_pending()
        if final:
            seen.update(s.key for s in final)

        assert len(seen) == 15
