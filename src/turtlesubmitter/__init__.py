"""Hunt sighting scouter for the Turtle scouting service.

Follows the ACT/IINACT network log, recognises hunt map links posted in chat,
snaps them to known spawn points and keeps a Turtle scout session up to date.

Key Components:
    - tail_reader: Follow-mode reading of the growing network log
    - parser: Chat line parsing into sightings
    - spawnpoints: Nearest spawn point resolution
    - aggregator: Latest-per-instance sighting store with flush flag
    - submitter: PATCH uploads to Turtle
    - scouter: Pipeline driver tying the above together

Example:
    >>> from turtlesubmitter import Scouter, ScouterConfig
    >>> config = ScouterConfig(session="abc", password="secret")
    >>> await Scouter(config).run("/path/to/Network_log.log")
"""

from __future__ import annotations

from .aggregator import SightingAggregator
from .config import ScouterConfig, load_config
from .models import Point, Sighting, TurtleSighting, TurtleSightings
from .parser import LineParser
from .reference import ReferenceData, load_reference_data
from .scouter import Scouter
from .spawnpoints import SpawnpointResolver
from .submitter import TurtleSubmitter
from .tail_reader import TailReader, tail_file

__all__ = [
    "LineParser",
    "Point",
    "ReferenceData",
    "Scouter",
    "ScouterConfig",
    "Sighting",
    "SightingAggregator",
    "SpawnpointResolver",
    "TailReader",
    "TurtleSighting",
    "TurtleSightings",
    "TurtleSubmitter",
    "load_config",
    "load_reference_data",
    "tail_file",
]

__version__ = "0.1.0"
