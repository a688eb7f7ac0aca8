"""Extract hunt sightings from ACT/IINACT network log lines.

Only chat lines (event code ``00``) are inspected. A sighting is recognised
when the message names a known monster and carries a map link such as::

    00|2024-08-21T17:07:49.3900000+03:00|0039||<E0BB>Urqopacha<E0B3> ( 27.2  , 12.8 )

where ``<E0BB>`` is the map-link glyph and the optional ``<E0B1>``..``<E0B6>``
glyph after the zone name is the instance number.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from .models import Point, Sighting
from .reference import ReferenceData
from .spawnpoints import SpawnpointResolver

logger = logging.getLogger(__name__)

CHAT_EVENT = "00"
MESSAGE_FIELD = 4

MAP_LINK_MARKER = "\ue0bb"
INSTANCE_ONE_MARKER = "\ue0b1"
INSTANCE_TWO_MARKER = "\ue0b2"
INSTANCE_LAST_MARKER = "\ue0b6"

# Decoded in place of an unreadable coordinate so that it never lands near a
# real spawn point
INVALID_COORDINATE = -2132831721.0

MAP_LINK_PATTERN = re.compile(
    MAP_LINK_MARKER
    + r"(?P<zone>[A-Za-z' ]+?)"
    + f"(?P<instance>[{INSTANCE_ONE_MARKER}-{INSTANCE_LAST_MARKER}])?"
    + r" \( ?(?P<x>[0-9]+\.[0-9]+) *?, ?(?P<y>[0-9]+\.[0-9]+)"
)

_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp, or return None if it is not one.

    ACT writes seven fractional digits; anything past microseconds is dropped.
    """
    text = _FRACTION.sub(r"\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    if "T" not in text and "t" not in text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def parse_coordinate(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return INVALID_COORDINATE


def decode_instance(marker: str | None) -> int:
    """Instance number for an optional instance glyph (absent means 1)."""
    if not marker:
        return 1
    return ord(marker) - ord(INSTANCE_TWO_MARKER) + 2


class LineParser:
    """Turns log lines into sightings with resolved spawn points.

    Attributes:
        reference: Reference tables for monster and zone lookups.
        resolver: Spawn point resolver applied to every sighting.
        lookback: Lines older than this are ignored.
    """

    def __init__(
        self,
        reference: ReferenceData,
        resolver: SpawnpointResolver,
        lookback: timedelta,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the parser.

        Args:
            reference: Reference tables for monster and zone lookups.
            resolver: Spawn point resolver applied to every sighting.
            lookback: Maximum age of a line that is still processed.
            clock: Returns the current aware time; defaults to UTC now.
        """
        self.reference = reference
        self.resolver = resolver
        self.lookback = lookback
        self._clock = clock or (lambda: datetime.now(UTC))

    def parse(self, line: str) -> Sighting | None:
        """Parse one log line.

        Returns:
            A Sighting snapped to a spawn point, or None if the line is not a
            recent chat map link for a known monster.
        """
        parts = line.split("|")
        if len(parts) < 2:
            return None

        timestamp = parse_timestamp(parts[1])
        if timestamp is not None and timestamp < self._clock() - self.lookback:
            return None

        if parts[0] == CHAT_EVENT:
            return self._parse_chat_flag(parts, timestamp)
        return None

    def _parse_chat_flag(self, parts: list[str], timestamp: datetime | None) -> Sighting | None:
        if len(parts) <= MESSAGE_FIELD:
            return None
        message = parts[MESSAGE_FIELD]

        name = self.reference.find_mob_name(message)
        if name is None:
            return None

        match = MAP_LINK_PATTERN.search(message)
        if match is None:
            logger.debug(f"Mention of {name} without a map link")
            return None

        zone_name = match.group("zone")
        sighting = Sighting(
            name=name,
            pos_x=parse_coordinate(match.group("x")),
            pos_y=parse_coordinate(match.group("y")),
            zone=self.reference.zone_id(zone_name),
            instance=decode_instance(match.group("instance")),
        )
        logger.info(f"Mob: {sighting} in {zone_name} at {timestamp}")

        spawn = self.resolver.resolve(sighting.zone, Point(sighting.pos_x, sighting.pos_y))
        sighting.pos_x = spawn.x
        sighting.pos_y = spawn.y
        return sighting
