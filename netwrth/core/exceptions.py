"""Exception hierarchy for netwrth."""


class NetwrthError(Exception):
    """Base class for all netwrth errors."""


class InvalidPeriodSpec(NetwrthError):
    """Period specification or window is malformed.

    Raised synchronously at construction or parse time, never from
    inside aggregation.
    """


class SnapshotLoadError(NetwrthError):
    """Record snapshot file cannot be read or validated."""


class ConfigError(NetwrthError):
    """Settings could not be built from environment or .env file."""
