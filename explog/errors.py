"""Domain-specific exceptions for the ExpLog core.

None of these are fatal to a running session: the tracker absorbs storage
problems and the interaction layer absorbs input and lookup problems.
"""


class ExpLogError(Exception):
    """Base class for every error raised by the explog package."""


class InvalidInput(ExpLogError, ValueError):
    """Raised when an amount is non-positive or unparsable, or a category is unknown."""


class NotFound(ExpLogError, LookupError):
    """Raised when a delete targets an expense id that is not in the collection."""


class StorageUnavailable(ExpLogError, OSError):
    """Raised when the key-value storage cannot be written."""


class CorruptStoredData(ExpLogError, ValueError):
    """Raised when the stored blob cannot be decoded into expense records."""
