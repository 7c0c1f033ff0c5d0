"""
Exceptions for the share receiver.

Validation failures are never raised; they are returned as lists of
ValidationError. The exceptions below cover startup and infrastructure
failures only.
"""
from typing import Optional


class ShareReceiverError(Exception):
    """Base exception for share receiver errors."""
    pass


class ConfigurationError(ShareReceiverError):
    """Raised when required process configuration is missing or invalid."""
    pass


class InfrastructureError(ShareReceiverError):
    """Raised when a dependency of the pipeline (RPC node, decoder) fails."""
    pass


class ReceiptFetchError(InfrastructureError):
    """Raised when a transaction receipt cannot be fetched."""

    def __init__(self, message: str, tx: Optional[str] = None):
        self.tx = tx
        super().__init__(message)


class LogDecodeError(InfrastructureError):
    """Raised when a receipt's logs cannot be decoded against the ABI."""
    pass
