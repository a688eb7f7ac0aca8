"""Structured logging for the hunt scouter.

Provides console and rotating file logging plus a JSONL audit trail of every
submission made to Turtle.
"""

import json
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Any

ROOT_LOGGER = "turtlesubmitter"
AUDIT_LOGGER = "turtlesubmitter.audit"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "asctime",
        "taskName",
    }
)


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    extras = {}
    for key, value in record.__dict__.items():
        if key in _RESERVED_ATTRS:
            continue
        try:
            json.dumps(value)  # Ensure serializable
            extras[key] = value
        except (TypeError, ValueError):
            extras[key] = str(value)
    return extras


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line.

    Args:
        message_key: Key the formatted message is stored under
        include_location: Also record module, function and line number
    """

    def __init__(self, message_key: str = "message", include_location: bool = False):
        super().__init__()
        self.message_key = message_key
        self.include_location = include_location

    def format(self, record):
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            self.message_key: record.getMessage(),
        }
        if self.include_location:
            log_obj.update(module=record.module, function=record.funcName, line=record.lineno)
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        log_obj.update(_record_extras(record))
        return json.dumps(log_obj)


class LoggingManager:
    """Configures the ``turtlesubmitter`` logger hierarchy."""

    def __init__(self, log_dir: str | Path | None = None, log_level: str = "INFO"):
        """Initialize logging manager.

        Args:
            log_dir: Directory for log files, console only when None
            log_level: Console log level name
        """
        self.log_dir = Path(log_dir).expanduser() if log_dir else None
        self.log_level = getattr(logging, log_level.upper(), None)
        if not isinstance(self.log_level, int):
            raise ValueError(f"Unknown log level: {log_level}")

        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._setup_root_logger()
        self._setup_audit_logger()

    def _setup_root_logger(self):
        """Setup main logger with console and (optionally) file handlers."""
        logger = logging.getLogger(ROOT_LOGGER)
        logger.setLevel(logging.DEBUG)  # Let handlers filter
        logger.propagate = False

        # Remove existing handlers
        logger.handlers.clear()

        # Console handler - human readable
        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)

        if self.log_dir:
            # File handler - structured JSON
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / "turtlesubmitter.log",
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)  # Capture everything to file
            file_handler.setFormatter(JsonLineFormatter(include_location=True))
            logger.addHandler(file_handler)

        self.logger = logger

    def _setup_audit_logger(self):
        """Setup submission audit logger (JSON Lines format)."""
        logger = logging.getLogger(AUDIT_LOGGER)
        logger.setLevel(logging.INFO)
        logger.propagate = False

        logger.handlers.clear()

        if self.log_dir:
            audit_dir = self.log_dir / "audit"
            audit_dir.mkdir(exist_ok=True)
            file_handler = logging.handlers.TimedRotatingFileHandler(
                audit_dir / "submissions.jsonl",
                when="midnight",
                interval=1,
                backupCount=30,  # Keep 30 days
                encoding="utf-8",
            )
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(JsonLineFormatter(message_key="event"))
            logger.addHandler(file_handler)
        else:
            logger.addHandler(logging.NullHandler())

        self.audit_logger = logger

    def close(self) -> None:
        """Flush and detach every handler installed by this manager."""
        for logger in (self.logger, self.audit_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)


def log_submission_event(
    event_type: str,
    session_id: str,
    sighting_count: int,
    details: dict[str, Any] | None = None,
) -> None:
    """Record a submission attempt in the audit trail.

    Args:
        event_type: Outcome (submission_succeeded, submission_failed, ...)
        session_id: Turtle scout session
        sighting_count: Number of sightings in the batch
        details: Additional event details
    """
    logging.getLogger(AUDIT_LOGGER).info(
        event_type,
        extra={
            "event_type": event_type,
            "session_id": session_id,
            "sighting_count": sighting_count,
            "details": details or {},
        },
    )
