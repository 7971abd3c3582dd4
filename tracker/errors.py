"""
Exceptions raised by the tracker core.
"""


class TrackerError(Exception):
    """Base class for tracker errors."""


class StorageFailure(TrackerError):
    """The underlying read, write or transaction failed."""


class Unauthenticated(TrackerError):
    """The request carries no established identity."""
