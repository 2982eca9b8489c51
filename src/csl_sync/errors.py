"""Exception types raised by csl-sync."""


class SyncError(Exception):
    """Base class for csl-sync errors."""

    pass


class DefinitionNotFoundError(SyncError, FileNotFoundError):
    """Raised when a definition file is not at the exact expected path."""

    pass


class DefinitionParseError(SyncError, ValueError):
    """Raised when a ``.csl`` file cannot be parsed into a definition."""

    pass


class ProfileNotFoundError(SyncError):
    """Raised when no sync profile is configured."""

    pass
