"""Data models for hunt scouting.

This module defines the structures that flow through the scouting pipeline:
map points, parsed sightings, and the wire records sent to Turtle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple


@dataclass(frozen=True)
class Point:
    """A position on a zone map.

    Used both for raw coordinates reported in chat and for the reference
    spawn points they are snapped to.

    Attributes:
        x: Horizontal map coordinate.
        y: Vertical map coordinate.
    """

    x: float
    y: float


class SightingKey(NamedTuple):
    """Identity of a tracked sighting: one monster in one instance."""

    name: str
    instance: int


@dataclass
class Sighting:
    """A monster reported at a position in a zone instance.

    Attributes:
        name: Canonical monster name from the reference tables.
        pos_x: Map X coordinate (resolved spawn point once parsed).
        pos_y: Map Y coordinate (resolved spawn point once parsed).
        zone: Territory id, 0 when the zone name is unknown.
        instance: 1-based zone instance number.
    """

    name: str
    pos_x: float = 0.0
    pos_y: float = 0.0
    zone: int = 0
    instance: int = 1

    @property
    def key(self) -> SightingKey:
        """Identity key used by the aggregator."""
        return SightingKey(self.name, self.instance)


def format_coordinate(value: float) -> str:
    """Format a coordinate with the shortest round-trip representation.

    Whole numbers drop their fractional part, so ``12.0`` becomes ``"12"``.
    """
    text = repr(float(value))
    if text.endswith(".0"):
        return text[:-2]
    return text


@dataclass(frozen=True)
class TurtleSighting:
    """Wire record for one sighting in a Turtle scout PATCH."""

    zone_id: int
    mob_id: int
    instance_number: int
    x: str
    y: str

    @classmethod
    def from_sighting(cls, sighting: Sighting, mob_id: int) -> TurtleSighting:
        return cls(
            zone_id=sighting.zone,
            mob_id=mob_id,
            instance_number=sighting.instance,
            x=format_coordinate(sighting.pos_x),
            y=format_coordinate(sighting.pos_y),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "zone_id": self.zone_id,
            "mob_id": self.mob_id,
            "instance_number": self.instance_number,
            "x": self.x,
            "y": self.y,
        }


@dataclass
class TurtleSightings:
    """Batch envelope posted to the scout session."""

    collaborator_password: str
    sightings: list[TurtleSighting] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "collaborator_password": self.collaborator_password,
            "sightings": [s.to_dict() for s in self.sightings],
        }
