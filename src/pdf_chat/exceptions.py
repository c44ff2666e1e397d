"""Exception hierarchy for the document chat pipeline.

Every failure that can end a request is one of these types, so the
orchestrator can report it as a single ``error`` event::

    PdfChatError (base)
    ├── InvalidConfiguration   bad chunking / component parameters
    ├── InvalidRequest         malformed caller request
    ├── IngestionFailure       document could not be extracted
    ├── EmbeddingFailure       embedding backend unreachable or misbehaving
    ├── DimensionMismatch      vector length disagrees with the index
    ├── ModelUnavailable       language-model endpoint unreachable / timed out
    └── StreamInterrupted      model output ended abnormally
"""

from __future__ import annotations


class PdfChatError(Exception):
    """Base exception for all pipeline errors.

    Attributes
    ----------
    message:
        Human-readable description, suitable for showing to a user.
    details:
        Optional technical detail (usually the underlying error text).
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"
        super().__init__(full_message)


class InvalidConfiguration(PdfChatError):
    """Raised when a component is configured with unusable parameters."""


class InvalidRequest(PdfChatError):
    """Raised when a request does not match the caller-facing protocol."""


class IngestionFailure(PdfChatError):
    """Raised when a document is corrupt, unsupported, or has no text."""

    def __init__(self, message: str, source: str | None = None, details: str | None = None) -> None:
        self.source = source
        if source:
            message = f"{message} [{source}]"
        super().__init__(message, details)


class EmbeddingFailure(PdfChatError):
    """Raised when the embedding service errors or returns unusable vectors."""


class DimensionMismatch(PdfChatError):
    """Raised when a vector's length disagrees with the index dimension.

    Attributes
    ----------
    expected:
        Dimension established by the index.
    actual:
        Dimension of the offending vector.
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Vector dimension {actual} does not match index dimension {expected}")


class ModelUnavailable(PdfChatError):
    """Raised when the language-model endpoint cannot be reached."""


class StreamInterrupted(PdfChatError):
    """Raised when the model stream ends abnormally or yields nothing usable."""
