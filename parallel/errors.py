"""Exception types raised by the board package."""


class ParallelError(Exception):
    """Base class for board errors."""
    pass


class BoardValidationError(ParallelError):
    """Raised when an imported board document fails shape validation."""
    pass


class RemoteStoreError(ParallelError):
    """Raised when the remote board store cannot be read or written."""
    pass
