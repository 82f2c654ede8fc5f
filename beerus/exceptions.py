"""
Beerus Exceptions

Custom exception classes for the Beerus RPC service.
"""


class BeerusException(Exception):
    """Base exception for Beerus."""
    pass


class DecodeError(BeerusException, ValueError):
    """Malformed wire input (bad hex, unknown block tag, wrong length)."""
    pass


class BackendError(BeerusException):
    """The light client could not answer (not synced, remote failure, timeout)."""
    pass


class BlockNotFoundError(BeerusException):
    """A block that must exist for the requested operation is absent."""
    pass


class IndexOutOfRangeError(BeerusException, IndexError):
    """Transaction index lies beyond the block's transaction list."""

    def __init__(self, index: int, length: int):
        super().__init__("index out of range")
        self.index = index
        self.length = length


class ConfigurationError(BeerusException):
    """Configuration error."""
    pass
