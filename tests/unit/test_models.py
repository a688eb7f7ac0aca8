"""Unit tests for models.py - sightings and wire records."""

import dataclasses

import pytest

from turtlesubmitter.models import (
    Point,
    Sighting,
    SightingKey,
    TurtleSighting,
    TurtleSightings,
    format_coordinate,
)


class TestPoint:
    def test_point_is_immutable(self):
        point = Point(1.5, 2.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            point.x = 3.0  # type: ignore[misc]

    def test_point_equality(self):
        assert Point(1.0, 2.0) == Point(1.0, 2.0)


class TestSightingKey:
    def test_key_is_name_and_instance(self):
        sighting = Sighting(name="Mirka", instance=3)
        assert sighting.key == SightingKey("Mirka", 3)

    def test_composite_key_does_not_collide(self):
        """("A1", 23) and ("A12", 3) would both read "A123" if concatenated."""
        first = Sighting(name="A1", instance=23)
        second = Sighting(name="A12", instance=3)
        assert first.key != second.key


class TestFormatCoordinate:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (12.0, "12"),
            (12.5, "12.5"),
            (0.1, "0.1"),
            (0.0, "0"),
            (27.25, "27.25"),
        ],
    )
    def test_shortest_representation(self, value, expected):
        assert format_coordinate(value) == expected


class TestTurtleSightings:
    def test_from_sighting(self):
        sighting = Sighting(name="Nechuciho", pos_x=27.2, pos_y=12.8, zone=1187, instance=2)

        record = TurtleSighting.from_sighting(sighting, mob_id=1)

        assert record == TurtleSighting(
            zone_id=1187, mob_id=1, instance_number=2, x="27.2", y="12.8"
        )

    def test_envelope_to_dict(self):
        envelope = TurtleSightings(
            collaborator_password="hunter2",
            sightings=[TurtleSighting(zone_id=478, mob_id=8, instance_number=1, x="123", y="56")],
        )

        assert envelope.to_dict() == {
            "collaborator_password": "hunter2",
            "sightings": [
                {"zone_id": 478, "mob_id": 8, "instance_number": 1, "x": "123", "y": "56"}
            ],
        }

    def test_empty_envelope(self):
        assert TurtleSightings(collaborator_password="p").to_dict()["sightings"] == []
