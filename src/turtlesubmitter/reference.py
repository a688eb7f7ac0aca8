"""Hunt reference tables: zones, monsters and spawn points."""

import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

import yaml

from .models import Point

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).parent / "data" / "reference.yaml"

# Turtle's fallback when a monster name has no registered id
UNKNOWN_MOB_ID = 1


class ReferenceData:
    """Read-only lookup tables shared by the parser, resolver and submitter.

    Instances are never mutated after construction, so a single instance can
    be read from any task without locking.
    """

    def __init__(
        self,
        zones: dict[str, int],
        mobs: dict[str, dict[str, int]],
        spawnpoints: dict[int, list[Point]],
    ):
        self._zones = dict(zones)
        self._mobs = {expansion: dict(names) for expansion, names in mobs.items()}
        self._spawnpoints = {zone: tuple(points) for zone, points in spawnpoints.items()}

    @classmethod
    def from_dict(cls, raw: dict) -> "ReferenceData":
        """Build reference data from the parsed YAML document.

        Raises:
            ValueError: If a section is missing or malformed
        """
        try:
            zones = {str(name): int(zone_id) for name, zone_id in raw["zones"].items()}
            mobs = {
                str(expansion): {str(name): int(mob_id) for name, mob_id in names.items()}
                for expansion, names in raw["mobs"].items()
            }
            spawnpoints = {
                int(zone_id): [Point(float(x), float(y)) for x, y in points]
                for zone_id, points in raw["spawnpoints"].items()
            }
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ValueError(f"Malformed reference data: {e}") from e

        return cls(zones=zones, mobs=mobs, spawnpoints=spawnpoints)

    @property
    def expansions(self) -> list[str]:
        return list(self._mobs)

    def zone_id(self, zone_name: str) -> int:
        """Territory id for a zone name, 0 when unknown."""
        return self._zones.get(zone_name, 0)

    def mob_names(self, expansions: Iterable[str] | None = None) -> list[str]:
        """Monster names in table order, optionally limited to some expansions.

        Unknown expansion codes contribute nothing.
        """
        if expansions is None:
            selected = self._mobs.values()
        else:
            selected = [self._mobs[e] for e in expansions if e in self._mobs]
        return [name for names in selected for name in names]

    def mob_id(self, name: str) -> int:
        """Turtle mob id for a monster name, UNKNOWN_MOB_ID when unresolved."""
        for names in self._mobs.values():
            if name in names:
                return names[name]
        return UNKNOWN_MOB_ID

    def find_mob_name(self, message: str) -> str | None:
        """First known monster name contained in a chat message."""
        for names in self._mobs.values():
            for name in names:
                if name in message:
                    return name
        return None

    def spawnpoints(self, zone_id: int) -> tuple[Point, ...]:
        """Registered spawn points for a zone, in table order."""
        return self._spawnpoints.get(zone_id, ())


@lru_cache(maxsize=1)
def load_reference_data(path: str | Path = DEFAULT_REFERENCE_PATH) -> ReferenceData:
    """Load the reference tables from YAML.

    Returns:
        Cached ReferenceData instance

    Raises:
        FileNotFoundError: If the reference file doesn't exist
        ValueError: If YAML parsing fails or the tables are malformed
    """
    reference_path = Path(path)

    if not reference_path.exists():
        raise FileNotFoundError(f"Reference data file not found: {reference_path}")

    try:
        with open(reference_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse reference data YAML: {e}") from e

    reference = ReferenceData.from_dict(raw or {})
    logger.debug(f"Loaded reference data from {reference_path}")
    return reference
