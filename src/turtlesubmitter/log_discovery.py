"""Locate the ACT/IINACT network log to follow."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from .errors import LogDiscoveryError

logger = logging.getLogger(__name__)


def detect_default_log_directory(environ: Mapping[str, str] | None = None) -> Path:
    """Return the default log directory for ACT or IINACT.

    Uses IINACTPATH if set, otherwise the first of ACT's and IINACT's default
    log directories that exists.

    Raises:
        LogDiscoveryError: If no candidate directory exists
    """
    env = os.environ if environ is None else environ

    configured = env.get("IINACTPATH")
    if configured:
        return Path(configured)

    candidates = []
    if env.get("APPDATA"):
        candidates.append(Path(env["APPDATA"]) / "Advanced Combat Tracker" / "FFXIVLogs")
    if env.get("HOME"):
        candidates.append(Path(env["HOME"]) / "Documents" / "IINACT")

    for candidate in candidates:
        if candidate.is_dir():
            return candidate

    raise LogDiscoveryError("Could not detect default log directory. Please set IINACTPATH")


def get_latest_file(directory: str | Path) -> Path:
    """Return the most recently modified file in a directory.

    Raises:
        LogDiscoveryError: If the directory cannot be read or holds no files
    """
    log_dir = Path(directory)

    try:
        entries = [entry for entry in log_dir.iterdir() if entry.is_file()]
        latest = max(entries, key=lambda entry: entry.stat().st_mtime, default=None)
    except OSError as e:
        raise LogDiscoveryError(f"Failed to read log directory {log_dir}: {e}") from e

    if latest is None:
        raise LogDiscoveryError(f"No log files found in {log_dir}")

    logger.info(f"Latest file: {latest}")
    return latest
