"""Exception hierarchy for mediakit commands."""


class MediaKitError(Exception):
    """Base class for all mediakit errors."""

    pass


class InputError(MediaKitError):
    """Invalid command input (missing root, no condition, bad option value)."""

    pass


class ExtractionError(MediaKitError):
    """A metadata probe could not read a file."""

    pass


class TaskExecutionError(MediaKitError):
    """A single batch task failed (transcoder exit code, implausible output)."""

    pass
