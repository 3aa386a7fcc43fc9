"""
Error taxonomy for the transaction processor.

Row-level defects are data (MalformedRecord), never exceptions. Only
stream-level and store-level failures are raised.
"""


class TransactionProcessorError(Exception):
    """Base class for all errors raised by the engine."""


class MalformedInput(TransactionProcessorError):
    """Raised when an uploaded stream cannot be read as a header plus rows."""


class StoreUnavailable(TransactionProcessorError):
    """Raised when the snapshot persistence layer cannot be reached."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Snapshot store unavailable during {operation}: {message}")


class ConfigurationError(ValueError):
    """Raised when settings cannot be loaded or are invalid."""
