"""Pydantic models for transcript documents.

Hierarchy:
  TranscriptEntry    — one speaker turn of the raw transcript data.
  EmbeddingMetadata  — ingestion bookkeeping written back to the transcript.
  Transcript         — a meeting transcript as served by the transcript store.
"""

from typing import Any

from pydantic import BaseModel


class TranscriptEntry(BaseModel):
    """A single speaker turn."""

    speaker: str
    text: str


class EmbeddingMetadata(BaseModel):
    """Ingestion metadata stored on the transcript after a successful run.

    Attributes:
        model:           Identifier of the embedding model that produced the vectors.
        mode:            "chunked" or "averaged".
        generated_at:    ISO-8601 timestamp of the first generation.
        last_updated:    ISO-8601 timestamp of the latest generation.
        content_hash:    Fingerprint of the normalized text the chunks were built from.
        content_length:  Length of the normalized text in characters.
        chunk_count:     Number of chunks persisted for the transcript.
    """

    model: str
    mode: str = "chunked"
    generated_at: str
    last_updated: str
    content_hash: str
    content_length: int
    chunk_count: int


class Transcript(BaseModel):
    """A meeting transcript.

    transcript_data holds the raw speaker turns, either as the JSON string
    persisted by the recorder or as an already decoded list of entries.
    Several transcripts may share one date; they belong to the same logical
    meeting.
    """

    id: str
    meeting_id: str | None = None
    date: str
    transcript_data: str | list[dict[str, Any]] | None = None
    embedding_metadata: EmbeddingMetadata | None = None
    # legacy whole-document vector, cleared once chunk-level storage is used
    embeddings: list[float] | None = None
