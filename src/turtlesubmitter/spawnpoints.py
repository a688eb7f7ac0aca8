"""Snap reported map coordinates to the closest known spawn point."""

from __future__ import annotations

from .models import Point
from .reference import ReferenceData

ORIGIN = Point(0.0, 0.0)


def manhattan_distance(a: Point, b: Point) -> float:
    return abs(a.x - b.x) + abs(a.y - b.y)


class SpawnpointResolver:
    """Resolves noisy chat coordinates to a registered spawn point.

    Map links in chat are rounded to one decimal and occasionally offset, so
    the reported position is replaced by the nearest spawn point registered for
    the zone. The earliest point in table order wins an exact tie.
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    def resolve(self, zone_id: int, raw: Point) -> Point:
        """Return the closest spawn point, or the origin if the zone has none."""
        closest = ORIGIN
        closest_distance: float | None = None
        for spawnpoint in self.reference.spawnpoints(zone_id):
            distance = manhattan_distance(spawnpoint, raw)
            if closest_distance is None or distance < closest_distance:
                closest = spawnpoint
                closest_distance = distance
        return closest
