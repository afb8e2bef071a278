"""
Exception hierarchy for the transcript retrieval pipeline.

Every error that can cross the pipeline boundary carries a stable ``kind``
string plus a human-readable message, so callers (HTTP layer, batch results)
can report it without inspecting the class.
"""

from typing import Any


class TranscriptPipelineError(Exception):
    """Base exception for all pipeline errors."""

    kind: str = "pipeline-error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Structured form used in API error bodies and batch results."""
        return {"error": self.kind, "message": self.message, "details": self.details}


class NotFoundError(TranscriptPipelineError):
    """Raised when a transcript (or one of its chunks) does not exist."""

    kind = "not-found"

    def __init__(self, transcript_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["transcript_id"] = transcript_id
        super().__init__(f"Transcript not found: {transcript_id}", details)


class NoContentError(TranscriptPipelineError):
    """Raised when a transcript is empty or its raw data cannot be parsed."""

    kind = "no-content"


class DimensionMismatchError(TranscriptPipelineError):
    """Raised when vectors of different lengths are averaged."""

    kind = "dimension-mismatch"

    def __init__(self, expected: int, actual: int, index: int) -> None:
        super().__init__(
            f"Embedding at position {index} has dimension {actual}, expected {expected}",
            {"expected": expected, "actual": actual, "index": index},
        )


class EmbeddingFailureError(TranscriptPipelineError):
    """Raised when the embedding backend fails for one input of a batch."""

    kind = "embedding-failure"

    def __init__(self, index: int, cause: Exception) -> None:
        self.index = index
        super().__init__(
            f"Embedding failed for input {index}: {cause}",
            {"index": index, "cause": type(cause).__name__},
        )


class RetrievalUnavailableError(TranscriptPipelineError):
    """Raised when every launched retrieval strategy failed."""

    kind = "retrieval-unavailable"


class RetrievalTimeoutError(TranscriptPipelineError):
    """Raised when a whole retrieval exceeds its time budget."""

    kind = "retrieval-timeout"
