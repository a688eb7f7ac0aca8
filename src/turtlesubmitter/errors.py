"""Exceptions that stop the scouter before the pipeline starts."""


class ScouterStartupError(Exception):
    """Base class for errors with no degraded mode to fall back to."""


class ConfigurationError(ScouterStartupError):
    """Missing or malformed configuration."""


class LogDiscoveryError(ScouterStartupError):
    """The network log directory or file could not be found."""
