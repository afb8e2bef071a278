"""Backend-neutral filter over stored chunks."""

from pydantic import BaseModel


class ChunkFilter(BaseModel):
    """Selects chunks by owning transcript.

    Attributes:
        transcript_ids:         Chunks must belong to one of these transcripts.
        exclude_content_hash:   If set, chunks carrying this content hash are
                                excluded (used to delete only superseded chunks).
    """

    transcript_ids: list[str]
    exclude_content_hash: str | None = None
