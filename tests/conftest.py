"""Shared fixtures for scouter tests."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from turtlesubmitter.config import ScouterConfig
from turtlesubmitter.models import Point
from turtlesubmitter.parser import LineParser
from turtlesubmitter.reference import ReferenceData, load_reference_data
from turtlesubmitter.spawnpoints import SpawnpointResolver

FIXED_NOW = datetime(2024, 8, 21, 15, 0, 0, tzinfo=UTC)


def chat_line(message: str, timestamp: str = "2024-08-21T17:07:49.3900000+03:00") -> str:
    """Build an ACT chat log line (event 00) carrying a message."""
    return f"00|{timestamp}|0039||{message}|2c4bf29b9acde190"


@pytest.fixture
def make_chat_line():
    return chat_line


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def reference() -> ReferenceData:
    """Bundled reference tables."""
    return load_reference_data()


@pytest.fixture
def small_reference() -> ReferenceData:
    """Tiny hand-written reference tables."""
    return ReferenceData(
        zones={"Idyllshire": 478, "Urqopacha": 1187},
        mobs={
            "DT": {"Nechuciho": 101, "Queen Hawk": 102, "Keheniheyamewi": 108},
            "HW": {"Mirka": 301},
        },
        spawnpoints={
            478: [Point(5.8, 6.9), Point(123.0, 56.0), Point(121.5, 58.2)],
            1187: [Point(10.0, 10.0), Point(20.0, 20.0)],
        },
    )


@pytest.fixture
def resolver(reference: ReferenceData) -> SpawnpointResolver:
    return SpawnpointResolver(reference)


@pytest.fixture
def line_parser(reference: ReferenceData, resolver: SpawnpointResolver) -> LineParser:
    """Parser with a 4h lookback and a clock pinned to FIXED_NOW."""
    return LineParser(
        reference=reference,
        resolver=resolver,
        lookback=timedelta(hours=4),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def small_line_parser(small_reference: ReferenceData) -> LineParser:
    """Parser over the hand-written tables, which include Idyllshire."""
    return LineParser(
        reference=small_reference,
        resolver=SpawnpointResolver(small_reference),
        lookback=timedelta(hours=4),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def scouter_config() -> ScouterConfig:
    return ScouterConfig(
        session="test-session",
        password="test-password",
        flush_interval=0.05,
        log_output_dir=None,
    )


@pytest.fixture
def network_log(tmp_path: Path) -> Path:
    """Empty network log file."""
    log_file = tmp_path / "Network_28000_20240821.log"
    log_file.write_text("")
    return log_file
