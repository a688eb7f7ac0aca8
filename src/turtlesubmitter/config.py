"""Configuration for the hunt scouter.

This module defines the configuration dataclass that controls the scouting
pipeline, plus the helpers that read it from the environment and from Turtle
share URLs.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from urllib.parse import urlsplit

from .errors import ConfigurationError

DEFAULT_LOOKBACK = timedelta(hours=4)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


@dataclass
class ScouterConfig:
    """Configuration for the scouting pipeline.

    Attributes:
        session: Turtle scout session id.
        password: Collaborator password for the session.
        expansions: Expansion codes to scout (e.g. ["DT", "EW"]); empty means all.
        lookback: Maximum age of a log line that is still reported (default: 4h).
        log_dir: Directory holding the ACT/IINACT network logs.
        service_url: Turtle service root URL.
        flush_interval: Seconds between submission checks (default: 1).
        submit_timeout: Seconds before a submission is abandoned (default: 5).
        tail_poll_interval: Seconds to wait at end of log before retrying (default: 0.01).
        log_level: Console log level (default: INFO).
        log_output_dir: Directory for our own log files, None for console only.
    """

    session: str
    password: str
    expansions: list[str] = field(default_factory=list)
    lookback: timedelta = DEFAULT_LOOKBACK
    log_dir: str | None = None
    service_url: str = "https://scout.wobbuffet.net"
    flush_interval: float = 1.0
    submit_timeout: float = 5.0
    tail_poll_interval: float = 0.01
    log_level: str = "INFO"
    log_output_dir: str | None = "~/.turtlesubmitter/logs"

    def __post_init__(self) -> None:
        if not self.password:
            raise ConfigurationError(
                "Turtle session password was not provided. Please provide the share URL "
                "as an argument or set TURTLE_PASSWORD"
            )
        if not self.session:
            raise ConfigurationError(
                "Turtle session was not provided. Please provide the share URL "
                "as an argument or set TURTLE_SESSION"
            )
        if self.flush_interval <= 0:
            raise ConfigurationError("flush_interval must be positive")
        if self.submit_timeout <= 0:
            raise ConfigurationError("submit_timeout must be positive")

    @property
    def share_url(self) -> str:
        return f"{self.service_url.rstrip('/')}/scout/{self.session}/{self.password}"


def parse_share_url(url: str) -> tuple[str, str]:
    """Split a Turtle share URL into (session, password).

    The share URL looks like ``https://scout.wobbuffet.net/scout/<session>/<password>``;
    the last two path segments are used.

    Raises:
        ConfigurationError: If the URL has fewer than two path segments
    """
    segments = [s for s in urlsplit(url.strip()).path.split("/") if s]
    if len(segments) < 2:
        raise ConfigurationError(f"Not a Turtle share URL: {url}")
    return segments[-2], segments[-1]


def parse_expansions(value: str | None) -> list[str]:
    """Parse a comma separated expansion filter such as ``DT,EW``."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_duration(value: str) -> timedelta:
    """Parse a duration written like ``4h``, ``90m`` or ``1h30m``.

    Raises:
        ConfigurationError: If the value is not a valid duration
    """
    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)

    seconds = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if not text or position != len(text):
        raise ConfigurationError(f"Invalid duration: {value!r}")
    return timedelta(seconds=sign * seconds)


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    share_url: str | None = None,
    expansions: str | None = None,
    lookback: str | None = None,
    log_dir: str | None = None,
    log_level: str | None = None,
) -> ScouterConfig:
    """Build a ScouterConfig from explicit values with environment fallback.

    Explicit arguments (usually command line flags) take precedence over
    TURTLE_URL, TURTLE_SESSION, TURTLE_PASSWORD and TURTLE_LOG_LEVEL.

    Raises:
        ConfigurationError: If required values are missing or malformed
    """
    env = os.environ if environ is None else environ

    session = env.get("TURTLE_SESSION", "")
    password = env.get("TURTLE_PASSWORD", "")

    url = share_url or env.get("TURTLE_URL", "")
    if url:
        session, password = parse_share_url(url)

    return ScouterConfig(
        session=session,
        password=password,
        expansions=parse_expansions(expansions),
        lookback=parse_duration(lookback) if lookback else DEFAULT_LOOKBACK,
        log_dir=log_dir,
        log_level=log_level or env.get("TURTLE_LOG_LEVEL", "INFO"),
    )
