"""Exception hierarchy for the Paperless bridge.

Every error maps onto one ``FailureKind`` so the workflow can report it in
the result instead of raising it to the caller.
"""

from typing import Optional

from ..models.ingestion import FailureKind


class PaperlessBridgeError(Exception):
    """Base class for all bridge errors."""

    kind: FailureKind = FailureKind.UNEXPECTED_ERROR

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TransportError(PaperlessBridgeError):
    """Connection failure or non-2xx response."""

    kind = FailureKind.TRANSPORT_FAILURE


class ProtocolError(PaperlessBridgeError):
    """Response arrived but its payload is empty or malformed."""

    kind = FailureKind.PROTOCOL_VIOLATION


class PollTimeoutError(PaperlessBridgeError):
    """Task did not reach a terminal state within the polling bound."""

    kind = FailureKind.POLL_TIMEOUT


class ExtractionError(PaperlessBridgeError):
    """No text could be extracted from a PDF."""

    kind = FailureKind.EXTRACTION_FAILURE


class StorageError(PaperlessBridgeError):
    """Scratch file could not be written."""

    kind = FailureKind.LOCAL_IO_FAILURE
