"""ChunkPayload model — metadata stored alongside each transcript chunk vector."""

from pydantic import BaseModel


class ChunkPayload(BaseModel):
    """Metadata payload stored alongside each chunk vector in a RAG backend.

    transcript_id is the hard filter key for every search; chunk_index and
    chunk_total describe the contiguous ordering 0..chunk_total-1 of the
    chunks of one transcript.

    Attributes:
        transcript_id:  ID of the owning transcript.
        meeting_id:     ID of the meeting the transcript was recorded in.
        date:           Meeting date; transcripts sharing a date form one logical meeting.
        chunk_index:    Zero-based position of this chunk within the transcript.
        chunk_total:    Number of chunks of the transcript.
        chunk_text:     Raw text of this chunk.
        content_hash:   Fingerprint of the transcript's normalized text.
                        Identical across all chunks of one ingestion run.
        embed_model:    Identifier of the model that produced the vector.
        created_at:     ISO-8601 timestamp of the ingestion run.
    """

    transcript_id: str
    meeting_id: str | None = None
    date: str
    chunk_index: int
    chunk_total: int
    chunk_text: str
    content_hash: str
    embed_model: str
    created_at: str
