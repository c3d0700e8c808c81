"""Errors raised while resolving a package against a lock file."""


class ResolutionError(Exception):
    """Base class for every fatal resolution failure."""


class LockFileNotFoundError(ResolutionError):
    """No lock file at the app root or at the workspace root."""


class LockFileParseError(ResolutionError):
    """The lock file exists but its contents could not be parsed."""


class VersionMismatchError(ResolutionError):
    """The installed version has no matching lock file entry."""


class EntryNotFoundError(ResolutionError):
    """Neither the legacy nor the flat npm lock file view lists the package."""


class IncompleteEntryError(ResolutionError):
    """A matching entry exists but carries no usable resolution field."""


class InstalledPackageError(ResolutionError):
    """The installed package manifest is missing or has no version."""
