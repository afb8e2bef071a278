"""Pydantic models for ingestion outcomes and embedding status."""

from enum import Enum

from pydantic import BaseModel

from shared.models.transcript import EmbeddingMetadata


class IngestionStatus(str, Enum):
    GENERATED = "generated"
    SKIPPED = "skipped"
    ERROR = "error"


class IngestionOutcome(BaseModel):
    """Result of one ingestion attempt for a single transcript.

    Attributes:
        transcript_id:         The transcript the attempt was made for.
        status:                generated | skipped | error.
        reason:                Stable kind string (e.g. "in-progress", "already-embedded", "not-found").
        message:               Human-readable detail.
        chunk_count:           Chunks persisted (generated only).
        embedding_dimensions:  Vector length (generated only).
        content_length:        Length of the normalized text (generated only).
    """

    transcript_id: str
    status: IngestionStatus
    reason: str | None = None
    message: str
    chunk_count: int = 0
    embedding_dimensions: int | None = None
    content_length: int | None = None


class IngestionCounts(BaseModel):
    processed: int = 0
    generated: int = 0
    skipped: int = 0
    errors: int = 0


class IngestionSummary(BaseModel):
    """Per-transcript outcomes of a batch plus aggregate counts."""

    summary: IngestionCounts
    results: list[IngestionOutcome]


class TranscriptEmbeddingStatus(BaseModel):
    transcript_id: str
    meeting_id: str | None = None
    has_embedding: bool
    embedding_metadata: EmbeddingMetadata | None = None
    content_length: int = 0


class EmbeddingStatusReport(BaseModel):
    """Aggregate readiness of a set of transcripts.

    status is "ready" when every found transcript has chunks, else "partial".
    """

    status: str
    total_transcripts: int
    embedded_transcripts: int
    transcripts: list[TranscriptEmbeddingStatus]
